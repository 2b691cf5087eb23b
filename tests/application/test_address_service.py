import pytest

from conftest import make_address, make_user
from grocery.data.models.address import AddressModel
from grocery.domain.exceptions import ConflictError, NotFoundError, ValidationError
from grocery.domain.schemas import AddressIn, AddressUpdate
from grocery.services.address_service import AddressService


def _payload(**overrides):
    data = {"description": "Home", "city": "Kigali", "street": "KG 11 Ave", "district": "Gasabo"}
    data.update(overrides)
    return AddressIn(**data)


def _defaults(db, user_id):
    db.expire_all()
    return db.query(AddressModel).filter_by(user_id=user_id, is_default=True).all()


@pytest.fixture()
def svc(db, lock_service):
    return AddressService(db, lock_service)


class TestCreateAddress:
    def test_first_address_becomes_default(self, svc, customer):
        address = svc.create_address(customer.id, _payload())
        assert address.is_default is True

    def test_second_address_is_not_default_unless_asked(self, svc, customer):
        svc.create_address(customer.id, _payload())
        second = svc.create_address(customer.id, _payload(description="Office"))
        assert second.is_default is False

    def test_new_default_clears_previous(self, db, svc, customer):
        first = svc.create_address(customer.id, _payload())
        second = svc.create_address(customer.id, _payload(description="Office", is_default=True))

        defaults = _defaults(db, customer.id)
        assert [a.id for a in defaults] == [second.id]
        assert db.get(AddressModel, first.id).is_default is False

    def test_blank_required_field_rejected(self, svc, customer):
        with pytest.raises(ValidationError, match="city"):
            svc.create_address(customer.id, _payload(city="   "))

    def test_lock_released_after_write(self, svc, customer, lock_service):
        svc.create_address(customer.id, _payload())
        assert lock_service.held == {}
        assert lock_service.acquired == 1

    def test_held_lock_raises_conflict(self, db, svc, customer, lock_service):
        lock_service.held[customer.id] = "someone-else"
        with pytest.raises(ConflictError):
            svc.create_address(customer.id, _payload())
        assert db.query(AddressModel).count() == 0


class TestSetDefault:
    def test_exactly_one_default_after_each_call(self, db, svc, customer):
        ids = [svc.create_address(customer.id, _payload(description=f"A{i}")).id for i in range(3)]

        for target in (ids[2], ids[0], ids[1], ids[1]):
            svc.set_default(customer.id, target)
            defaults = _defaults(db, customer.id)
            assert [a.id for a in defaults] == [target]

    def test_other_users_addresses_untouched(self, db, svc, customer):
        other = make_user(db, email="other@example.com")
        theirs = make_address(db, other, is_default=True)
        mine = svc.create_address(customer.id, _payload())

        svc.set_default(customer.id, mine.id)
        db.expire_all()
        assert db.get(AddressModel, theirs.id).is_default is True

    def test_foreign_address_is_not_found(self, db, svc, customer):
        other = make_user(db, email="other@example.com")
        theirs = make_address(db, other)
        with pytest.raises(NotFoundError):
            svc.set_default(customer.id, theirs.id)

    def test_held_lock_raises_conflict_and_keeps_state(self, db, svc, customer, lock_service):
        first = svc.create_address(customer.id, _payload())
        second = svc.create_address(customer.id, _payload(description="Office"))

        lock_service.held[customer.id] = "concurrent-request"
        with pytest.raises(ConflictError):
            svc.set_default(customer.id, second.id)

        assert [a.id for a in _defaults(db, customer.id)] == [first.id]


class TestUpdateAndDelete:
    def test_update_fields(self, svc, customer):
        address = svc.create_address(customer.id, _payload())
        updated = svc.update_address(customer.id, address.id, AddressUpdate(city="Musanze", postal_code="00100"))
        assert updated.city == "Musanze"
        assert updated.postal_code == "00100"
        assert updated.user_id == customer.id

    def test_update_to_default_clears_others(self, db, svc, customer):
        svc.create_address(customer.id, _payload())
        second = svc.create_address(customer.id, _payload(description="Office"))

        svc.update_address(customer.id, second.id, AddressUpdate(is_default=True))
        assert [a.id for a in _defaults(db, customer.id)] == [second.id]

    def test_update_blank_required_field_rejected(self, svc, customer):
        address = svc.create_address(customer.id, _payload())
        with pytest.raises(ValidationError):
            svc.update_address(customer.id, address.id, AddressUpdate(street=""))

    def test_update_foreign_address_not_found(self, db, svc, customer):
        other = make_user(db, email="other@example.com")
        theirs = make_address(db, other)
        with pytest.raises(NotFoundError):
            svc.update_address(customer.id, theirs.id, AddressUpdate(city="X"))

    def test_delete_default_leaves_no_default(self, db, svc, customer):
        address = svc.create_address(customer.id, _payload())
        svc.delete_address(customer.id, address.id)
        assert _defaults(db, customer.id) == []

    def test_delete_foreign_address_not_found(self, db, svc, customer):
        other = make_user(db, email="other@example.com")
        theirs = make_address(db, other)
        with pytest.raises(NotFoundError):
            svc.delete_address(customer.id, theirs.id)
        db.expire_all()
        assert db.get(AddressModel, theirs.id) is not None

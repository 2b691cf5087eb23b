# grocery/services/address_service.py
from contextlib import contextmanager
from uuid import uuid4

from sqlalchemy.orm import Session

from grocery.data.models.address import AddressModel
from grocery.domain.exceptions import ConflictError, NotFoundError, ValidationError
from grocery.domain.schemas import AddressIn, AddressUpdate
from grocery.repos.address_repo import AddressRepo
from grocery.services.lock_service import LockService
from grocery.utils.logging import get_logger
from grocery.utils.settings import ADDRESS_LOCK_TTL_SECONDS

logger = get_logger(__name__)

REQUIRED_FIELDS = ("description", "city", "street", "district")


def _check_required(values: dict, fields=REQUIRED_FIELDS) -> None:
    missing = [f for f in fields if f in values and not (values[f] or "").strip()]
    if missing:
        raise ValidationError(f"Missing required address fields: {', '.join(missing)}")


class AddressService:
    """
    Shipping addresses of one user.

    Anything that can move the default flag runs under the per-user Redis
    lock and inside a single DB transaction, so a user never ends up with
    two defaults.
    """

    def __init__(self, db: Session, lock_service: LockService):
        self.db = db
        self.repo = AddressRepo(db)
        self.lock_service = lock_service

    @contextmanager
    def _user_lock(self, user_id: int):
        token = uuid4().hex
        if not self.lock_service.acquire_user_lock(user_id, token, ADDRESS_LOCK_TTL_SECONDS):
            logger.info("address_lock_busy", user_id=user_id)
            raise ConflictError("Another address update is in progress, please retry")
        try:
            yield
        finally:
            try:
                self.lock_service.release_user_lock(user_id, token)
            except Exception as e:
                # the lock expires on its own after the TTL
                logger.warning("address_lock_release_failed", user_id=user_id, error=str(e))

    # query
    def list_addresses(self, user_id: int) -> list[AddressModel]:
        return self.repo.list_for_user(user_id)

    # commands
    def create_address(self, user_id: int, payload: AddressIn) -> AddressModel:
        values = payload.model_dump()
        _check_required(values)
        for f in REQUIRED_FIELDS:
            values[f] = values[f].strip()

        with self._user_lock(user_id):
            try:
                make_default = values.pop("is_default") or self.repo.count_for_user(user_id) == 0
                if make_default:
                    self.repo.clear_default(user_id)
                address = self.repo.add(AddressModel(user_id=user_id, is_default=make_default, **values))
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(address)
        logger.info("address_created", user_id=user_id, address_id=address.id, is_default=address.is_default)
        return address

    def update_address(self, user_id: int, address_id: int, payload: AddressUpdate) -> AddressModel:
        changes = payload.model_dump(exclude_unset=True)
        _check_required(changes)

        with self._user_lock(user_id):
            try:
                address = self.repo.get_owned(address_id, user_id)
                if not address:
                    raise NotFoundError("Address not found")

                make_default = changes.pop("is_default", None)
                for field, value in changes.items():
                    if field in REQUIRED_FIELDS:
                        value = value.strip()
                    setattr(address, field, value)

                if make_default:
                    self.repo.clear_default(user_id, except_id=address.id)
                    address.is_default = True
                elif make_default is False:
                    address.is_default = False

                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(address)
        return address

    def set_default(self, user_id: int, address_id: int) -> AddressModel:
        with self._user_lock(user_id):
            try:
                address = self.repo.get_owned(address_id, user_id)
                if not address:
                    raise NotFoundError("Address not found")
                self.repo.set_default(address_id, user_id)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

        self.db.refresh(address)
        logger.info("address_default_set", user_id=user_id, address_id=address_id)
        return address

    def delete_address(self, user_id: int, address_id: int) -> None:
        # leaves the user without a default when the default is removed
        address = self.repo.get_owned(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")
        self.repo.delete(address)
        self.db.commit()
        logger.info("address_deleted", user_id=user_id, address_id=address_id)

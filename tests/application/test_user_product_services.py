from decimal import Decimal

import pytest

from conftest import make_address, make_user
from grocery.data.models.order import OrderModel
from grocery.domain.exceptions import NotFoundError, UnauthorizedError, ValidationError
from grocery.domain.schemas import LoginIn, ProductIn, ProductUpdate, RegisterIn
from grocery.services.cart_service import CartService
from grocery.services.customer_service import CustomerService
from grocery.services.product_service import ProductService
from grocery.services.user_service import UserService
from grocery.utils.security import decode_access_token


class TestUserService:
    def test_register_returns_customer_and_token(self, db):
        user, token = UserService(db).register(
            RegisterIn(full_name="Eric M", email="Eric@Example.com", password="secret123")
        )
        assert user.role == "customer"
        assert user.email == "eric@example.com"
        assert decode_access_token(token)["sub"] == str(user.id)

    def test_duplicate_email(self, db, customer):
        with pytest.raises(ValidationError):
            UserService(db).register(RegisterIn(full_name="Dup", email="JANE@example.com", password="secret123"))

    def test_login(self, db, customer):
        user, token = UserService(db).login(LoginIn(email="jane@example.com", password="secret123"))
        assert user.id == customer.id
        assert decode_access_token(token)["role"] == "customer"

    def test_login_wrong_password(self, db, customer):
        with pytest.raises(UnauthorizedError):
            UserService(db).login(LoginIn(email="jane@example.com", password="nope"))

    def test_create_staff_user_is_idempotent(self, db):
        svc = UserService(db)
        first = svc.create_staff_user("Sam", "sam@example.com", "pw123456", "seller")
        again = svc.create_staff_user("Sam", "sam@example.com", "pw123456", "seller")
        assert first.id == again.id
        with pytest.raises(ValidationError):
            svc.create_staff_user("X", "x@example.com", "pw123456", "customer")


class TestProductService:
    def test_create_and_search(self, db):
        svc = ProductService(db)
        svc.create_product(ProductIn(name="Bananas", price=Decimal("2500"), category="Fruits"))
        svc.create_product(ProductIn(name="Milk", price=Decimal("800"), category="Dairy", in_stock=False))

        assert [p.name for p in svc.list_products(search="fruit")] == ["Bananas"]
        assert [p.name for p in svc.list_products(in_stock_only=True)] == ["Bananas"]

    def test_update_keeps_required_fields(self, db):
        svc = ProductService(db)
        product = svc.create_product(ProductIn(name="Milk", price=Decimal("800")))
        updated = svc.update_product(product.id, ProductUpdate(offer_price=Decimal("700"), price=None))
        assert updated.price == Decimal("800")
        assert updated.effective_price == Decimal("700")

    def test_missing_product(self, db):
        with pytest.raises(NotFoundError):
            ProductService(db).get_product(404)

    def test_stock_toggle_and_explicit_set(self, db):
        svc = ProductService(db)
        product = svc.create_product(ProductIn(name="Eggs", price=Decimal("200")))

        assert svc.set_in_stock(product.id).in_stock is False
        assert svc.set_in_stock(product.id).in_stock is True
        assert svc.set_in_stock(product.id, True).in_stock is True

    def test_deleted_product_drops_from_cart(self, db, customer):
        products = ProductService(db)
        eggs = products.create_product(ProductIn(name="Eggs", price=Decimal("200")))
        rice = products.create_product(ProductIn(name="Rice", price=Decimal("1500")))
        carts = CartService(db)
        carts.add_product(customer.id, eggs.id, 2)
        carts.add_product(customer.id, rice.id, 1)

        products.delete_product(eggs.id)

        with pytest.raises(NotFoundError):
            products.get_product(eggs.id)
        cart = carts.get_cart(customer.id)
        assert [i["name"] for i in cart["items"]] == ["Rice"]
        assert cart["total"] == Decimal("1500.00")

    def test_delete_missing_product(self, db):
        with pytest.raises(NotFoundError):
            ProductService(db).delete_product(404)


class TestCustomerService:
    def _order(self, db, user, amount, status="pending"):
        order = OrderModel(
            user_id=user.id,
            user_full_name=user.full_name,
            user_email=user.email,
            delivery_address={"city": "Kigali"},
            amount=Decimal(amount),
            payment_type="cash",
            payment_status="pending",
            status=status,
        )
        db.add(order)
        db.commit()
        return order

    def test_list_customers_with_totals(self, db, customer, seller):
        quiet = make_user(db, email="quiet@example.com", full_name="Quiet Q")
        self._order(db, customer, "1000.00")
        self._order(db, customer, "500.00")
        self._order(db, customer, "900.00", status="cancelled")

        result = CustomerService(db).list_customers()
        rows = {c["email"]: c for c in result["customers"]}

        assert result["total_customers"] == 2
        assert set(rows) == {"jane@example.com", "quiet@example.com"}
        assert rows["jane@example.com"]["orders_count"] == 3
        assert rows["jane@example.com"]["spent"] == Decimal("1500.00")
        assert rows["jane@example.com"]["last_order"] is not None
        assert rows[quiet.email]["orders_count"] == 0
        assert rows[quiet.email]["spent"] == Decimal("0.00")

    def test_search_and_pagination(self, db, customer):
        make_user(db, email="bob@example.com", full_name="Bob B")
        svc = CustomerService(db)

        assert [c["full_name"] for c in svc.list_customers(search="BOB")["customers"]] == ["Bob B"]
        page = svc.list_customers(page=2, limit=1)
        assert page["total_pages"] == 2
        assert len(page["customers"]) == 1

    def test_details_include_addresses(self, db, customer):
        make_address(db, customer, is_default=True)
        details = CustomerService(db).get_customer_details(customer.id)
        assert details["email"] == "jane@example.com"
        assert [a.city for a in details["addresses"]] == ["Kigali"]

    def test_staff_are_not_customers(self, db, seller):
        with pytest.raises(NotFoundError):
            CustomerService(db).get_customer(seller.id)

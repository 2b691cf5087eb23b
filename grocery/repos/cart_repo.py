# grocery/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from grocery.data.models.cart import CartModel
from grocery.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(select(CartModel).where(CartModel.user_id == user_id)).scalar_one_or_none()

    def create_cart(self, user_id: int) -> CartModel:
        cart = CartModel(user_id=user_id, version=1)
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(CartItemModel.cart_id == cart_id, CartItemModel.product_id == product_id)
        ).scalar_one_or_none()

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel).where(CartItemModel.cart_id == cart_id).order_by(CartItemModel.id)
            ).scalars()
        )

    def add_item(self, cart_id: int, product_id: int, quantity: int) -> CartItemModel:
        item = CartItemModel(cart_id=cart_id, product_id=product_id, quantity=quantity)
        self.db.add(item)
        self.db.flush()
        return item

    def delete_item(self, item: CartItemModel) -> None:
        self.db.delete(item)
        self.db.flush()

    def clear_items(self, cart_id: int) -> None:
        self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.cart_id == cart_id)
            .execution_options(synchronize_session="fetch")
        )

    def delete_items(self, item_ids: list[int]) -> None:
        if not item_ids:
            return
        self.db.execute(
            delete(CartItemModel)
            .where(CartItemModel.id.in_(item_ids))
            .execution_options(synchronize_session="fetch")
        )

    def bump_version(self, cart: CartModel, expected_version: int) -> bool:
        """Compare-and-set on the version column; False means another writer won."""
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart.id, CartModel.version == expected_version)
            .values(version=expected_version + 1, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        self.db.expire(cart, ["version", "updated_at"])
        return True

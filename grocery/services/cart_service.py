# grocery/services/cart_service.py
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grocery.data.models.cart import CartModel
from grocery.domain.exceptions import ConflictError, NotFoundError, ValidationError
from grocery.repos.cart_repo import CartRepo
from grocery.repos.product_repo import ProductRepo
from grocery.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    One cart per user, product -> quantity.

    Commands (add, set_quantity, remove, clear) change state and bump the
    cart version with a compare-and-set; the query (get_cart) only reads and
    prices the lines from the live catalog.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    # query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)
        if not cart:
            return {"user_id": user_id, "version": 0, "items": [], "total": Decimal("0.00")}

        items = self.repo.get_cart_items(cart.id)
        products = self.products.get_many(i.product_id for i in items)

        lines = []
        for i in items:
            product = products.get(i.product_id)
            if product is None:
                # product was deleted from the catalog
                continue
            price = product.effective_price
            lines.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "unit": product.unit,
                    "image": product.image,
                    "price": price,
                    "quantity": i.quantity,
                    "subtotal": price * i.quantity,
                }
            )

        total = sum((line["subtotal"] for line in lines), Decimal("0.00"))
        return {"user_id": user_id, "version": cart.version, "items": lines, "total": total}

    # commands
    def add_product(self, user_id: int, product_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")

        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.in_stock:
            raise ValidationError(f"{product.name} is out of stock")

        def change(cart: CartModel):
            item = self.repo.get_item(cart.id, product_id)
            if item:
                item.quantity += quantity
            else:
                self.repo.add_item(cart.id, product_id, quantity)

        self._write(user_id, change, create=True)
        logger.info("cart_item_added", user_id=user_id, product_id=product_id, quantity=quantity)
        return self.get_cart(user_id)

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        def change(cart: CartModel):
            item = self.repo.get_item(cart.id, product_id)
            if not item:
                raise NotFoundError("Product not in cart")
            if quantity <= 0:
                self.repo.delete_item(item)
            else:
                item.quantity = quantity

        self._write(user_id, change)
        return self.get_cart(user_id)

    def remove_product(self, user_id: int, product_id: int) -> Dict[str, Any]:
        def change(cart: CartModel):
            item = self.repo.get_item(cart.id, product_id)
            if not item:
                raise NotFoundError("Product not in cart")
            self.repo.delete_item(item)

        self._write(user_id, change)
        return self.get_cart(user_id)

    def clear(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_by_user(user_id)
        if cart:
            self._write(user_id, lambda c: self.repo.clear_items(c.id))
        return self.get_cart(user_id)

    def _write(self, user_id: int, change, create: bool = False) -> None:
        """Apply ``change`` to the cart and bump its version in one transaction."""
        try:
            cart = self.repo.get_by_user(user_id)
            if not cart:
                if not create:
                    raise NotFoundError("Product not in cart")
                cart = self.repo.create_cart(user_id)

            expected = cart.version
            change(cart)

            if not self.repo.bump_version(cart, expected):
                logger.info("cart_version_conflict", user_id=user_id, expected=expected)
                raise ConflictError("Cart was modified concurrently, please retry")

            self.db.commit()
        except IntegrityError as e:
            # a concurrent request created the same cart or line first
            self.db.rollback()
            logger.info("cart_insert_conflict", user_id=user_id, error=str(e.orig))
            raise ConflictError("Cart was modified concurrently, please retry")
        except Exception:
            self.db.rollback()
            raise

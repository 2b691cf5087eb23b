# import all models so SQLAlchemy registers them in Base.metadata

from grocery.data.models.user import UserModel
from grocery.data.models.product import ProductModel
from grocery.data.models.address import AddressModel
from grocery.data.models.cart import CartModel
from grocery.data.models.cart_item import CartItemModel
from grocery.data.models.order import OrderModel
from grocery.data.models.order_item import OrderItemModel
from grocery.data.models.notification import NotificationModel

__all__ = [
    "UserModel",
    "ProductModel",
    "AddressModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "NotificationModel",
]

# grocery/api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from grocery.data.database import get_db
from grocery.data.models.user import UserModel
from grocery.domain.exceptions import ForbiddenError, UnauthorizedError
from grocery.repos.user_repo import UserRepo
from grocery.services.address_service import AddressService
from grocery.services.cart_service import CartService
from grocery.services.customer_service import CustomerService
from grocery.services.lock_service import LockService
from grocery.services.notification_service import NotificationService
from grocery.services.order_service import OrderService
from grocery.services.product_service import ProductService
from grocery.services.user_service import STAFF_ROLES, UserService
from grocery.utils.logging import add_context
from grocery.utils.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)

_lock_service: LockService | None = None


def get_lock_service() -> LockService:
    global _lock_service
    if _lock_service is None:
        _lock_service = LockService()
    return _lock_service


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> UserModel:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token payload")

    user = UserRepo(db).get_user(user_id)
    if not user or user.status != "Active":
        raise UnauthorizedError("User not found")

    add_context(user_id=user.id)
    return user


def require_staff(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role not in STAFF_ROLES:
        raise ForbiddenError("Seller or admin access required")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if user.role != "admin":
        raise ForbiddenError("Admin access required")
    return user


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    return ProductService(db)


def get_address_service(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> AddressService:
    return AddressService(db, lock_service)


def get_cart_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


def get_customer_service(db: Session = Depends(get_db)) -> CustomerService:
    return CustomerService(db)


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)

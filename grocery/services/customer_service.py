# grocery/services/customer_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from grocery.data.models.user import UserModel
from grocery.domain.exceptions import NotFoundError
from grocery.repos.address_repo import AddressRepo
from grocery.repos.user_repo import UserRepo


class CustomerService:
    """Read-only customer pages for admins."""

    def __init__(self, db: Session):
        self.users = UserRepo(db)
        self.addresses = AddressRepo(db)

    def list_customers(self, page: int = 1, limit: int = 10, search: str | None = None) -> dict:
        page, limit = max(page, 1), max(min(limit, 100), 1)
        rows, total = self.users.page_customers(
            (page - 1) * limit, limit, search=search.strip() if search else None
        )

        customers = []
        for user, orders_count, spent, last_order in rows:
            customers.append(
                {
                    "id": user.id,
                    "full_name": user.full_name,
                    "email": user.email,
                    "phone_number": user.phone_number,
                    "status": user.status,
                    "orders_count": orders_count or 0,
                    "spent": Decimal(str(spent or 0)).quantize(Decimal("0.01")),
                    "last_order": last_order,
                }
            )
        return {
            "customers": customers,
            "total_customers": total,
            "total_pages": (total + limit - 1) // limit,
            "current_page": page,
        }

    def get_customer(self, customer_id: int) -> UserModel:
        user = self.users.get_user(customer_id)
        if not user or user.role != "customer":
            raise NotFoundError("Customer not found")
        return user

    def get_customer_details(self, customer_id: int) -> dict:
        user = self.get_customer(customer_id)
        return {
            "id": user.id,
            "full_name": user.full_name,
            "email": user.email,
            "phone_number": user.phone_number,
            "role": user.role,
            "status": user.status,
            "created_at": user.created_at,
            "addresses": self.addresses.list_for_user(user.id),
        }

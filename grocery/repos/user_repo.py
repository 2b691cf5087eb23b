from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from grocery.data.models.order import OrderModel
from grocery.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_by_email(self, email: str) -> UserModel | None:
        return self.db.execute(
            select(UserModel).where(func.lower(UserModel.email) == email.lower())
        ).scalar_one_or_none()

    def list_by_roles(self, roles: tuple[str, ...]) -> list[UserModel]:
        return list(
            self.db.execute(
                select(UserModel).where(UserModel.role.in_(roles), UserModel.status == "Active")
            ).scalars()
        )

    def page_customers(self, offset: int, limit: int, search: str | None = None):
        """Customers newest first, each row ``(user, orders_count, spent, last_order)``."""
        stmt = select(UserModel).where(UserModel.role == "customer")
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(UserModel.full_name).like(pattern),
                    func.lower(UserModel.email).like(pattern),
                    UserModel.phone_number.like(f"%{search}%"),
                )
            )
        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()

        # cancelled orders do not count towards what a customer spent
        totals = (
            select(
                OrderModel.user_id,
                func.count(OrderModel.id).label("orders_count"),
                func.sum(case((OrderModel.status != "cancelled", OrderModel.amount), else_=0)).label("spent"),
                func.max(OrderModel.created_at).label("last_order"),
            )
            .group_by(OrderModel.user_id)
            .subquery()
        )
        rows = self.db.execute(
            stmt.add_columns(totals.c.orders_count, totals.c.spent, totals.c.last_order)
            .outerjoin(totals, totals.c.user_id == UserModel.id)
            .order_by(UserModel.created_at.desc(), UserModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return rows, total

    def create_user(self, user: UserModel) -> UserModel:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

# grocery/repos/order_repo.py
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from grocery.data.models.order import OrderModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).options(selectinload(OrderModel.items)).where(OrderModel.id == order_id)
        ).scalar_one_or_none()

    def get_by_tx_ref(self, tx_ref: str) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel).options(selectinload(OrderModel.items)).where(OrderModel.tx_ref == tx_ref)
        ).scalar_one_or_none()

    def _filtered(self, user_id=None, search=None, start=None, end=None):
        stmt = select(OrderModel)
        if user_id is not None:
            stmt = stmt.where(OrderModel.user_id == user_id)
        if search:
            pattern = f"%{search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(OrderModel.user_full_name).like(pattern),
                    func.lower(OrderModel.user_email).like(pattern),
                )
            )
        if start is not None:
            stmt = stmt.where(OrderModel.created_at >= start)
        if end is not None:
            stmt = stmt.where(OrderModel.created_at <= end)
        return stmt

    def page(
        self,
        offset: int,
        limit: int,
        user_id: int | None = None,
        search: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[list[OrderModel], int]:
        stmt = self._filtered(user_id, search, start, end)
        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        rows = self.db.execute(
            stmt.options(selectinload(OrderModel.items))
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .offset(offset)
            .limit(limit)
        ).scalars()
        return list(rows), total

    def count_by(self, column) -> dict[str, int]:
        rows = self.db.execute(select(column, func.count(OrderModel.id)).group_by(column)).all()
        return {value: count for value, count in rows}

    def count_all(self) -> int:
        return self.db.execute(select(func.count(OrderModel.id))).scalar_one()

    def revenue_excluding(self, status: str):
        return self.db.execute(
            select(func.coalesce(func.sum(OrderModel.amount), 0)).where(OrderModel.status != status)
        ).scalar_one()

    def created_since(self, since: datetime) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(OrderModel.created_at >= since).order_by(OrderModel.created_at)
            ).scalars()
        )

    def unpaid_online_before(self, cutoff: datetime) -> list[OrderModel]:
        return list(
            self.db.execute(
                select(OrderModel).where(
                    OrderModel.payment_type == "online",
                    OrderModel.status == "pending",
                    OrderModel.payment_status.in_(("pending", "failed")),
                    OrderModel.created_at < cutoff,
                )
            ).scalars()
        )

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from grocery.data.models.notification import NotificationModel


class NotificationRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_many(self, notifications: list[NotificationModel]) -> list[NotificationModel]:
        self.db.add_all(notifications)
        self.db.commit()
        return notifications

    def get_owned(self, notification_id: int, recipient_id: int) -> NotificationModel | None:
        return self.db.execute(
            select(NotificationModel).where(
                NotificationModel.id == notification_id,
                NotificationModel.recipient_id == recipient_id,
            )
        ).scalar_one_or_none()

    def page(self, recipient_id: int, offset: int, limit: int) -> tuple[list[NotificationModel], int, int]:
        base = select(NotificationModel).where(NotificationModel.recipient_id == recipient_id)
        total = self.db.execute(select(func.count()).select_from(base.subquery())).scalar_one()
        unread = self.db.execute(
            select(func.count(NotificationModel.id)).where(
                NotificationModel.recipient_id == recipient_id,
                NotificationModel.is_read.is_(False),
            )
        ).scalar_one()
        rows = self.db.execute(
            base.order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc()).offset(offset).limit(limit)
        ).scalars()
        return list(rows), total, unread

    def delete_read(self, recipient_id: int) -> int:
        rows = list(
            self.db.execute(
                select(NotificationModel).where(
                    NotificationModel.recipient_id == recipient_id,
                    NotificationModel.is_read.is_(True),
                )
            ).scalars()
        )
        for row in rows:
            self.db.delete(row)
        self.db.commit()
        return len(rows)

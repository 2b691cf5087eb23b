# grocery/services/notification_service.py
from sqlalchemy.orm import Session

from grocery.celery_worker import celery_app
from grocery.data.models.notification import NotificationModel
from grocery.domain.exceptions import NotFoundError
from grocery.repos.notification_repo import NotificationRepo
from grocery.repos.user_repo import UserRepo
from grocery.services.user_service import STAFF_ROLES
from grocery.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Notification records for order events.

    notify_* methods run after the order transaction has committed and never
    raise: a failed notification is logged, the order change stands. Each
    stored record is handed to Celery for the live push.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepo(db)
        self.users = UserRepo(db)

    # dispatch
    def notify(self, recipient_ids, order_id: int, message: str, type_: str) -> list[NotificationModel]:
        try:
            created = self.repo.add_many(
                [
                    NotificationModel(recipient_id=rid, order_id=order_id, message=message, type=type_)
                    for rid in recipient_ids
                ]
            )
        except Exception as e:
            self.db.rollback()
            logger.warning("notification_create_failed", order_id=order_id, type=type_, error=str(e))
            return []

        for n in created:
            self._push(n)
        return created

    def notify_staff(self, order_id: int, message: str, type_: str = "new_order") -> list[NotificationModel]:
        try:
            staff_ids = [u.id for u in self.users.list_by_roles(STAFF_ROLES)]
        except Exception as e:
            logger.warning("notification_recipients_failed", order_id=order_id, error=str(e))
            return []
        return self.notify(staff_ids, order_id, message, type_)

    def _push(self, notification: NotificationModel) -> None:
        try:
            push_notification_task.delay(
                notification.recipient_id,
                notification.id,
                notification.type,
                notification.message,
            )
        except Exception as e:
            logger.warning("notification_push_enqueue_failed", notification_id=notification.id, error=str(e))

    # queries / commands for the recipient
    def list_for(self, recipient_id: int, page: int = 1, limit: int = 20) -> dict:
        page = max(page, 1)
        limit = max(min(limit, 100), 1)
        rows, total, unread = self.repo.page(recipient_id, (page - 1) * limit, limit)
        return {
            "notifications": rows,
            "total": total,
            "unread": unread,
            "current_page": page,
            "total_pages": (total + limit - 1) // limit,
        }

    def mark_read(self, recipient_id: int, notification_id: int) -> NotificationModel:
        notification = self.repo.get_owned(notification_id, recipient_id)
        if not notification:
            raise NotFoundError("Notification not found")
        if not notification.is_read:
            notification.is_read = True
            self.db.commit()
        return notification

    def clear_read(self, recipient_id: int) -> int:
        deleted = self.repo.delete_read(recipient_id)
        logger.info("notifications_cleared", recipient_id=recipient_id, deleted=deleted)
        return deleted


@celery_app.task(name="grocery.services.notification_service.push_notification_task")
def push_notification_task(recipient_id: int, notification_id: int, type_: str, message: str):
    """
    Live push to the recipient's channel. Delivery itself (websocket, e-mail,
    SMS) is external; the worker only records that it ran.
    """
    logger.info(
        "notification_pushed",
        recipient_id=recipient_id,
        notification_id=notification_id,
        type=type_,
        message=message,
    )
    return {"recipient_id": recipient_id, "notification_id": notification_id, "status": "sent"}

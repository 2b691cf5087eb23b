# grocery/tasks/expire.py
from datetime import datetime, timedelta, timezone

from grocery.celery_worker import celery_app
from grocery.data.database import SessionLocal
from grocery.services.order_service import OrderService
from grocery.utils.logging import get_logger
from grocery.utils.settings import ORDER_PAYMENT_TTL_SECONDS

logger = get_logger(__name__)


@celery_app.task(name="grocery.tasks.expire.expire_unpaid_orders_task")
def expire_unpaid_orders_task(ttl_seconds: int | None = None) -> int:
    ttl = ORDER_PAYMENT_TTL_SECONDS if ttl_seconds is None else ttl_seconds
    if ttl <= 0:
        logger.debug("expire_unpaid_orders_disabled")
        return 0

    db = SessionLocal()
    try:
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=ttl)
        expired = OrderService(db).expire_unpaid_online_orders(cutoff)
        logger.info("expire_unpaid_orders_done", expired=expired)
        return expired
    finally:
        db.close()

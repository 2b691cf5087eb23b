# grocery/celery_worker.py
from celery import Celery

from grocery.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND, ORDER_PAYMENT_TTL_SECONDS

celery_app = Celery(
    "grocery",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks live outside this module and have to be imported for the worker to register them
celery_app.conf.imports = (
    "grocery.tasks.expire",
    "grocery.services.notification_service",
)

celery_app.conf.timezone = "UTC"

# abandoned online payments stay pending unless a TTL is configured
if ORDER_PAYMENT_TTL_SECONDS > 0:
    celery_app.conf.beat_schedule = {
        "expire-unpaid-orders-every-10-minutes": {
            "task": "grocery.tasks.expire.expire_unpaid_orders_task",
            "schedule": 600.0,
        },
    }

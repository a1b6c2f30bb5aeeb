from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "orders",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["app.tasks.order_tasks"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Notifications go to their own queue so they never wait behind other work
    task_default_queue="notifications",
    task_routes={"notify_order_created": {"queue": "notifications"}},

    # A notification is a single order read plus a send
    task_time_limit=60,
    task_soft_time_limit=45,
    task_default_retry_delay=60,

    worker_prefetch_multiplier=1,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
)

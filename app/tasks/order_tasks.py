import logging

from app.database import get_storer
from app.storer.errors import NotFoundError, ReadError
from app.tasks.celery_app import celery_app

logger = logging.getLogger(__name__)


def format_order_notification(order) -> str:
    """Build the notification text for a newly created order."""
    lines = [f"Order #{order.id} placed by user #{order.user_id} ({order.payment_method})"]
    for item in order.items:
        lines.append(f"  {item.quantity} x {item.name} @ {item.price}")
    lines.append(
        f"  tax {order.tax_price}, shipping {order.shipping_price}, total {order.total_price}"
    )
    return "\n".join(lines)


@celery_app.task(bind=True, name="notify_order_created", max_retries=3)
def notify_order_created(self, order_id: int) -> dict:
    """
    Send the notification for a newly created order.

    The order is loaded through the storer. A missing order is reported
    as failed; transient read errors are retried, since the storer itself
    never retries.

    Args:
        order_id: ID of the order to announce

    Returns:
        Dictionary with the notification result
    """
    logger.info(f"Sending notification for Order #{order_id}")
    storer = get_storer()

    try:
        order = storer.get_order(order_id)
    except NotFoundError:
        logger.error(f"Order #{order_id} not found")
        return {"status": "failed", "order_id": order_id, "error": "Order not found"}
    except ReadError as e:
        logger.error(f"Error loading Order #{order_id}: {e}")
        raise self.retry(exc=e)

    message = format_order_notification(order)
    logger.info(message)

    return {
        "status": "sent",
        "order_id": order_id,
        "message": message,
    }

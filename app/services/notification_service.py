# app/services/notification_service.py
from decimal import Decimal

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total: Decimal):
        """
        Powiadomienie o przyjeciu zamowienia. Zamowienie jest juz zapisane,
        wiec blad brokera tylko logujemy.
        """
        try:
            send_order_notification_task.delay(user_id, order_id, str(total))
        except Exception as e:
            logger.error(f"Could not dispatch notification for order {order_id}: {e}")

    @staticmethod
    def send_status_notification(user_id: int, order_id: int, status: str):
        try:
            send_status_notification_task.delay(user_id, order_id, status)
        except Exception as e:
            logger.error(f"Could not dispatch status notification for order {order_id}: {e}")


@celery_app.task(name="app.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} received, total {total}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="app.services.notification_service.send_status_notification_task")
def send_status_notification_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}

"""
Notification sinks.

A sink delivers an event to a recipient. Delivery is fire-and-forget from the
caller's point of view: the allocation engine logs sink failures and carries
on, so sinks are free to raise.
"""
import json
import logging
from typing import Any, Dict

from confluent_kafka import Producer
from django.core.serializers.json import DjangoJSONEncoder

from allocation import settings as allocation_settings
from allocation.core.constants import EVENT_NEW_ORDER
from notifications.models import Notification

logger = logging.getLogger(__name__)

EVENT_TITLES = {
    EVENT_NEW_ORDER: "New Order Received",
}


def build_message(event_type: str, payload: Dict[str, Any]) -> str:
    if event_type == EVENT_NEW_ORDER and payload.get('order_id') is not None:
        return f"You have a new order #{str(payload['order_id'])[-6:]}"
    return EVENT_TITLES.get(event_type, event_type.replace('_', ' ').capitalize())


class NotificationSink:
    def notify(self, recipient_id, event_type: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class DatabaseNotificationSink(NotificationSink):
    """Stores the notification so the recipient's app can pick it up."""

    def notify(self, recipient_id, event_type: str, payload: Dict[str, Any]) -> None:
        notification = Notification.objects.create(
            recipient_id=str(recipient_id),
            event_type=event_type,
            title=EVENT_TITLES.get(event_type, event_type),
            message=build_message(event_type, payload),
            data=json.loads(json.dumps(payload, cls=DjangoJSONEncoder)),
        )
        logger.info(f"Notification {notification.id} ({event_type}) stored for recipient {recipient_id}")


class KafkaNotificationSink(NotificationSink):
    """
    Publishes the notification to a Kafka topic for the push gateway.

    Waits at most ``flush_timeout`` seconds for delivery. Messages still
    queued after that are left to the producer and reported through the
    delivery callback.
    """

    def __init__(self, producer=None, topic=None, flush_timeout=None):
        if producer is None:
            producer = Producer({'bootstrap.servers': allocation_settings.KAFKA_BROKER_URL})
        self.producer = producer
        self.topic = topic or allocation_settings.VENDOR_NOTIFICATIONS_TOPIC
        if flush_timeout is None:
            flush_timeout = allocation_settings.NOTIFICATION_FLUSH_TIMEOUT_SECONDS
        self.flush_timeout = flush_timeout

    def _on_delivery(self, err, msg):
        if err is not None:
            logger.error(f"Notification delivery to '{self.topic}' failed: {err}")
        else:
            logger.debug(f"Notification delivered to {msg.topic()} [{msg.partition()}]")

    def notify(self, recipient_id, event_type: str, payload: Dict[str, Any]) -> None:
        event = {
            "recipient_id": str(recipient_id),
            "event_type": event_type,
            "title": EVENT_TITLES.get(event_type, event_type),
            "message": build_message(event_type, payload),
            "data": payload,
        }
        self.producer.produce(
            self.topic,
            key=str(recipient_id).encode('utf-8'),
            value=json.dumps(event, cls=DjangoJSONEncoder).encode('utf-8'),
            on_delivery=self._on_delivery,
        )
        pending = self.producer.flush(timeout=self.flush_timeout)
        if pending:
            logger.warning(
                f"{pending} notification(s) for recipient {recipient_id} still queued for "
                f"'{self.topic}' after {self.flush_timeout}s"
            )
            return
        logger.info(f"Notification ({event_type}) published to '{self.topic}' for recipient {recipient_id}")


def get_notification_sink(backend=None) -> NotificationSink:
    backend = (backend or allocation_settings.NOTIFICATION_BACKEND).lower()
    if backend == 'database':
        return DatabaseNotificationSink()
    if backend == 'kafka':
        return KafkaNotificationSink()
    raise ValueError(f"Unknown notification backend: {backend}")

import json
import logging

from confluent_kafka import Consumer, KafkaException

from allocation import settings as allocation_settings
from allocation.services.factory import build_allocation_engine

logger = logging.getLogger(__name__)


def create_kafka_consumer():
    return Consumer({
        'bootstrap.servers': allocation_settings.KAFKA_BROKER_URL,
        'group.id': allocation_settings.ORDER_EVENTS_GROUP_ID,
        'auto.offset.reset': 'earliest',
    })


def handle_order_placed(event, engine=None):
    """
    Auto-assign the order referenced by an ``orders.placed`` event.

    Returns the AssignmentOutcome, or None if the payload was unusable.
    """
    order_id = event.get("order_id") if isinstance(event, dict) else None
    if order_id is None:
        logger.error("Invalid order event payload: missing order_id")
        return None

    try:
        order_id = int(order_id)
    except (TypeError, ValueError):
        logger.error(f"Invalid order event payload: order_id {order_id!r} is not an integer")
        return None

    engine = engine or build_allocation_engine()
    outcome = engine.auto_assign_order(order_id)
    if outcome.success:
        logger.info(
            f"Order {order_id} assigned to vendor {outcome.vendor_id}, "
            f"ETA {outcome.estimated_minutes} min"
        )
    elif outcome.error.is_retryable:
        logger.error(f"Order {order_id} assignment hit a transient failure: {outcome.error.value}")
    else:
        logger.warning(f"Order {order_id} not assigned: {outcome.error.message}")
    return outcome


def _decode(msg):
    try:
        return json.loads(msg.value().decode('utf-8'))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Skipping undecodable order event: {e}")
        return None


def start_order_consumer():
    consumer = create_kafka_consumer()
    consumer.subscribe([allocation_settings.ORDER_EVENTS_TOPIC])

    try:
        while True:
            msg = consumer.poll(1.0)
            if msg is None:
                continue
            if msg.error():
                raise KafkaException(msg.error())

            event = _decode(msg)
            if event is not None:
                handle_order_placed(event)
    except KeyboardInterrupt:
        logger.info("Kafka consumer stopped")
    finally:
        consumer.close()


def run_consumer_once():
    consumer = create_kafka_consumer()
    consumer.subscribe([allocation_settings.ORDER_EVENTS_TOPIC])
    try:
        msg = consumer.poll(timeout=5.0)
        if msg and not msg.error():
            event = _decode(msg)
            if event is not None:
                return handle_order_placed(event)
        return None
    finally:
        consumer.close()

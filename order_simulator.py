import os
import sys
import json

import django
from confluent_kafka import Producer

# Setup Django (assuming this file is at the project root level)
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dispatch_core.settings')
django.setup()

from allocation import settings as allocation_settings  # noqa: E402


def publish_order_placed(order_id):
    producer = Producer({'bootstrap.servers': allocation_settings.KAFKA_BROKER_URL})
    event = {"order_id": order_id}
    producer.produce(allocation_settings.ORDER_EVENTS_TOPIC, json.dumps(event).encode('utf-8'))
    producer.flush()
    print(f"Published order {order_id} to '{allocation_settings.ORDER_EVENTS_TOPIC}'")


if __name__ == '__main__':
    if len(sys.argv) != 2:
        sys.exit("usage: python order_simulator.py <order_id>")
    publish_order_placed(int(sys.argv[1]))

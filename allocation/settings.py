import os

from allocation.core.constants import (
    DEFAULT_AVERAGE_SPEED_KMH,
    DEFAULT_BROWSE_RADIUS_KM,
    DEFAULT_PREPARATION_MINUTES,
)
from allocation.utils.env_loader import load_env_from_file

# Try different possible locations for the env file
env_paths = [
    os.path.join(os.path.dirname(__file__), 'env_var.env'),  # App directory
    os.path.join(os.path.dirname(os.path.dirname(__file__)), 'env_var.env'),  # Root directory
]

for path in env_paths:
    if os.path.exists(path) and load_env_from_file(path, override=False):
        break


def _float_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    value = float(raw)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw}")
    return value


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    value = int(raw)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {raw}")
    return value


# Delivery-time estimation
AVERAGE_DELIVERY_SPEED_KMH = _float_env('AVERAGE_DELIVERY_SPEED_KMH', DEFAULT_AVERAGE_SPEED_KMH)
PREPARATION_BUFFER_MINUTES = _int_env('PREPARATION_BUFFER_MINUTES', DEFAULT_PREPARATION_MINUTES)

# Browse/map views
DEFAULT_RADIUS_KM = _float_env('DEFAULT_BROWSE_RADIUS_KM', DEFAULT_BROWSE_RADIUS_KM)

# Notifications: 'database' or 'kafka'
NOTIFICATION_BACKEND = os.getenv('NOTIFICATION_BACKEND', 'database').lower()
# Upper bound on how long a Kafka notification may hold up an assignment
NOTIFICATION_FLUSH_TIMEOUT_SECONDS = _float_env('NOTIFICATION_FLUSH_TIMEOUT_SECONDS', 2.0)

# Kafka topics
KAFKA_BROKER_URL = os.getenv('KAFKA_BROKER_URL', 'localhost:9092')
ORDER_EVENTS_TOPIC = os.getenv('ORDER_EVENTS_TOPIC', 'orders.placed')
ORDER_EVENTS_GROUP_ID = os.getenv('ORDER_EVENTS_GROUP_ID', 'allocation_consumer_group')
VENDOR_NOTIFICATIONS_TOPIC = os.getenv('VENDOR_NOTIFICATIONS_TOPIC', 'vendor.notifications')

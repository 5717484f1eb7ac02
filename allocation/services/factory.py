from allocation import settings as allocation_settings
from allocation.clients.django_store import DjangoAllocationStore
from allocation.services.allocation_engine import AllocationEngine
from notifications.sinks import get_notification_sink


def build_allocation_engine(store=None, notifier=None) -> AllocationEngine:
    """Wire an engine to the Django store and the configured notification backend."""
    return AllocationEngine(
        store=store or DjangoAllocationStore(),
        notifier=notifier or get_notification_sink(),
        average_speed_kmh=allocation_settings.AVERAGE_DELIVERY_SPEED_KMH,
        preparation_minutes=allocation_settings.PREPARATION_BUFFER_MINUTES,
        default_radius_km=allocation_settings.DEFAULT_RADIUS_KM,
    )

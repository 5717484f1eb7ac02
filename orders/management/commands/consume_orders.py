from django.core.management.base import BaseCommand

from allocation import settings as allocation_settings
from orders.consumers.order_events import start_order_consumer


class Command(BaseCommand):
    help = 'Start Kafka consumer that auto-assigns vendors to newly placed orders'

    def handle(self, *args, **kwargs):
        self.stdout.write(self.style.SUCCESS(
            f"Starting order consumer on '{allocation_settings.ORDER_EVENTS_TOPIC}'..."
        ))
        start_order_consumer()

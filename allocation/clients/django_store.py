import logging
from datetime import datetime
from typing import Iterable, List, Optional

from django.db import DatabaseError
from django.utils import timezone

from allocation.clients.store import AllocationStore
from allocation.core import constants
from allocation.core.types import Coordinate, OrderSnapshot, StoreUnavailableError, VendorSnapshot
from allocation.services.mappers import map_order_model, map_vendor_model
from orders.models import Order
from vendors.models import Vendor

logger = logging.getLogger(__name__)


class DjangoAllocationStore(AllocationStore):
    """AllocationStore backed by the Django ORM."""

    def list_eligible_vendors(self, online_only: bool = True, verified_only: bool = True) -> List[VendorSnapshot]:
        qs = Vendor.objects.all()
        if online_only:
            qs = qs.filter(is_online=True)
        if verified_only:
            qs = qs.filter(is_verified=True)
        try:
            rows = list(qs.prefetch_related('inventory').order_by('id'))
        except DatabaseError as e:
            logger.error(f"Failed to fetch vendors: {e}", exc_info=True)
            raise StoreUnavailableError("Failed to fetch vendors") from e

        vendors = []
        for row in rows:
            snapshot = self._map_vendor(row)
            if snapshot is not None:
                vendors.append(snapshot)
        return vendors

    def _map_vendor(self, row) -> Optional[VendorSnapshot]:
        # Rows that fail validation are skipped with a warning
        try:
            return map_vendor_model(row)
        except ValueError as e:
            logger.warning(f"Skipping vendor {row.pk} with invalid stored data: {e}")
            return None

    def get_order(self, order_id) -> Optional[OrderSnapshot]:
        try:
            order = Order.objects.prefetch_related('items').filter(pk=order_id).first()
        except (TypeError, ValueError):
            # Malformed ids cannot match any row
            return None
        except DatabaseError as e:
            logger.error(f"Failed to fetch order {order_id}: {e}", exc_info=True)
            raise StoreUnavailableError(f"Failed to fetch order {order_id}") from e
        return map_order_model(order) if order else None

    def get_vendor(self, vendor_id) -> Optional[VendorSnapshot]:
        try:
            vendor = Vendor.objects.prefetch_related('inventory').filter(pk=vendor_id).first()
        except (TypeError, ValueError):
            # Malformed ids cannot match any row
            return None
        except DatabaseError as e:
            logger.error(f"Failed to fetch vendor {vendor_id}: {e}", exc_info=True)
            raise StoreUnavailableError(f"Failed to fetch vendor {vendor_id}") from e
        return self._map_vendor(vendor) if vendor else None

    def list_orders(self, vendor_id, statuses: Iterable[str]) -> List[OrderSnapshot]:
        qs = (
            Order.objects.filter(vendor_id=vendor_id, status__in=list(statuses))
            .prefetch_related('items')
            .order_by('-created_at', '-id')
        )
        try:
            return [map_order_model(o) for o in qs]
        except DatabaseError as e:
            logger.error(f"Failed to fetch orders for vendor {vendor_id}: {e}", exc_info=True)
            raise StoreUnavailableError(f"Failed to fetch orders for vendor {vendor_id}") from e

    def update_order_assignment(self, order_id, vendor_id, estimated_delivery_time: datetime, status: str) -> bool:
        # Single conditional UPDATE: a concurrent assignment that got there first leaves 0 rows to match
        try:
            updated = Order.objects.filter(
                pk=order_id,
                vendor__isnull=True,
                status=constants.ORDER_STATUS_PENDING,
            ).update(
                vendor_id=vendor_id,
                estimated_delivery_time=estimated_delivery_time,
                status=status,
                updated_at=timezone.now(),
            )
        except DatabaseError as e:
            logger.error(f"Failed to assign vendor {vendor_id} to order {order_id}: {e}", exc_info=True)
            raise StoreUnavailableError("Failed to assign vendor to order") from e
        return updated == 1

    def update_vendor_location(self, vendor_id, location: Coordinate) -> bool:
        try:
            updated = Vendor.objects.filter(pk=vendor_id).update(
                latitude=round(location.latitude, 6),
                longitude=round(location.longitude, 6),
                last_location_update=timezone.now(),
            )
        except (TypeError, ValueError):
            return False
        except DatabaseError as e:
            logger.error(f"Failed to update location for vendor {vendor_id}: {e}", exc_info=True)
            raise StoreUnavailableError("Failed to update location") from e
        return updated == 1

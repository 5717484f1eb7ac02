import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from django.utils import timezone

from allocation.clients.store import AllocationStore
from allocation.core.constants import (
    ACTIVE_ORDER_STATUSES,
    DEFAULT_AVERAGE_SPEED_KMH,
    DEFAULT_BROWSE_RADIUS_KM,
    DEFAULT_PREPARATION_MINUTES,
    EVENT_NEW_ORDER,
    ORDER_STATUS_PENDING,
)
from allocation.core.distance import distances_from, estimate_delivery_minutes
from allocation.core.types import (
    AllocationError,
    AllocationResult,
    AssignmentOutcome,
    Coordinate,
    OrderSnapshot,
    StoreUnavailableError,
    VendorSnapshot,
)

logger = logging.getLogger(__name__)


class AllocationEngine:
    """
    Greedy per-order vendor allocation.

    Picks the nearest online, verified vendor that stocks every brand in the
    order and has the customer inside its service radius, then commits the
    assignment with a conditional write and notifies the vendor.

    No lock is held across the read-rank-write sequence. Vendor state read
    at the start of a call may be slightly stale by the time the assignment
    is written; only the final write is guarded.
    """

    def __init__(
        self,
        store: AllocationStore,
        notifier,
        clock: Callable[[], datetime] = timezone.now,
        average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
        preparation_minutes: int = DEFAULT_PREPARATION_MINUTES,
        default_radius_km: float = DEFAULT_BROWSE_RADIUS_KM,
    ):
        self.store = store
        self.notifier = notifier
        self.clock = clock
        self.average_speed_kmh = average_speed_kmh
        self.preparation_minutes = preparation_minutes
        self.default_radius_km = default_radius_km

    def find_nearest_vendor(self, customer_location: Coordinate, required_brands: Iterable[str]) -> AllocationResult:
        """
        Find the closest vendor able to fulfil an order.

        The stock filter runs before the distance filter so that "nobody has
        it" and "nobody near you has it" stay distinguishable.

        Args:
            customer_location: Delivery coordinate.
            required_brands: Brands the vendor must have in stock.

        Returns:
            AllocationResult with the vendor, distance and ETA, or an error kind.
        """
        brands = frozenset(required_brands)

        try:
            candidates = self.store.list_eligible_vendors(online_only=True, verified_only=True)
        except StoreUnavailableError as e:
            logger.error(f"Vendor lookup failed: {e}")
            return AllocationResult.failure(AllocationError.STORE_UNAVAILABLE)

        if not candidates:
            logger.warning("No online and verified vendors available.")
            return AllocationResult.failure(AllocationError.NO_VENDORS_AVAILABLE)

        stocked = [vendor for vendor in candidates if vendor.stocks_all(brands)]
        if not stocked:
            logger.warning(f"None of {len(candidates)} vendors stock all of {sorted(brands)}.")
            return AllocationResult.failure(AllocationError.NO_STOCK_AVAILABLE)

        ranked = self._rank_by_distance(customer_location, stocked)
        if not ranked:
            logger.warning(
                f"{len(stocked)} stocked vendors found but none serve "
                f"({customer_location.latitude}, {customer_location.longitude})."
            )
            return AllocationResult.failure(AllocationError.NO_VENDORS_IN_AREA)

        distance_km, vendor = ranked[0]
        estimated_minutes = estimate_delivery_minutes(
            distance_km,
            average_speed_kmh=self.average_speed_kmh,
            preparation_minutes=self.preparation_minutes,
        )
        logger.debug(f"Nearest vendor {vendor.id} at {distance_km:.2f} km, ETA {estimated_minutes} min.")
        return AllocationResult(vendor=vendor, distance_km=distance_km, estimated_minutes=estimated_minutes)

    def auto_assign_order(self, order_id) -> AssignmentOutcome:
        """
        Assign an unassigned pending order to its nearest eligible vendor.

        A second call for the same order, concurrent or not, returns
        ALREADY_ASSIGNED and never replaces the first vendor.
        """
        try:
            order = self.store.get_order(order_id)
        except StoreUnavailableError as e:
            logger.error(f"Order lookup failed for {order_id}: {e}")
            return AssignmentOutcome.failure(AllocationError.STORE_UNAVAILABLE, order_id=order_id)

        rejection = self._check_assignable(order_id, order)
        if rejection is not None:
            return rejection

        result = self.find_nearest_vendor(order.delivery_location, order.required_brands)
        if not result.ok:
            logger.warning(f"Order {order.id} could not be allocated: {result.error.value}")
            return AssignmentOutcome.failure(result.error, order_id=order.id)

        vendor = result.vendor
        estimated_delivery_time = self.clock() + timedelta(minutes=result.estimated_minutes)

        try:
            assigned = self.store.update_order_assignment(
                order.id, vendor.id, estimated_delivery_time, ORDER_STATUS_PENDING
            )
        except StoreUnavailableError as e:
            logger.error(f"Failed to persist assignment of order {order.id} to vendor {vendor.id}: {e}")
            return AssignmentOutcome.failure(AllocationError.STORE_UNAVAILABLE, order_id=order.id)

        if not assigned:
            logger.warning(f"Order {order.id} was assigned by another request before this one could commit.")
            return AssignmentOutcome.failure(AllocationError.ALREADY_ASSIGNED, order_id=order.id)

        logger.info(
            f"Order {order.id} assigned to vendor {vendor.id} "
            f"({result.distance_km:.2f} km, ETA {result.estimated_minutes} min)."
        )

        notified = self._notify_vendor(vendor.id, order.id, result, estimated_delivery_time)

        return AssignmentOutcome(
            success=True,
            order_id=order.id,
            vendor_id=vendor.id,
            distance_km=result.distance_km,
            estimated_minutes=result.estimated_minutes,
            estimated_delivery_time=estimated_delivery_time,
            notified=notified,
        )

    def get_vendors_in_radius(self, center: Coordinate, radius_km: Optional[float] = None) -> List[VendorSnapshot]:
        """
        Online, verified vendors within ``radius_km`` of ``center``, nearest first.

        Stock is not considered. Raises StoreUnavailableError if the store fails.
        """
        radius = self.default_radius_km if radius_km is None else float(radius_km)
        if radius <= 0:
            raise ValueError(f"radius_km must be positive, got {radius}")

        vendors = self.store.list_eligible_vendors(online_only=True, verified_only=True)
        return [vendor for _, vendor in self._rank_by_distance(center, vendors, radius_km=radius)]

    def update_vendor_location(self, vendor_id, new_location: Coordinate) -> AssignmentOutcome:
        """Overwrite a vendor's live position (last write wins)."""
        try:
            updated = self.store.update_vendor_location(vendor_id, new_location)
        except StoreUnavailableError as e:
            logger.error(f"Location update failed for vendor {vendor_id}: {e}")
            return AssignmentOutcome.failure(AllocationError.STORE_UNAVAILABLE, vendor_id=vendor_id)

        if not updated:
            return AssignmentOutcome.failure(AllocationError.VENDOR_NOT_FOUND, vendor_id=vendor_id)

        logger.debug(f"Vendor {vendor_id} moved to ({new_location.latitude}, {new_location.longitude}).")
        return AssignmentOutcome(success=True, vendor_id=vendor_id)

    def get_vendor_active_orders(self, vendor_id) -> List[OrderSnapshot]:
        """Accepted, preparing and out-for-delivery orders of a vendor, newest first."""
        return self.store.list_orders(vendor_id, ACTIVE_ORDER_STATUSES)

    def _check_assignable(self, order_id, order: Optional[OrderSnapshot]) -> Optional[AssignmentOutcome]:
        if order is None:
            logger.warning(f"Order {order_id} not found.")
            return AssignmentOutcome.failure(AllocationError.ORDER_NOT_FOUND, order_id=order_id)
        if order.is_assigned:
            logger.info(f"Order {order.id} already assigned to vendor {order.vendor_id}.")
            return AssignmentOutcome.failure(
                AllocationError.ALREADY_ASSIGNED, order_id=order.id, vendor_id=order.vendor_id
            )
        if order.status != ORDER_STATUS_PENDING:
            logger.warning(f"Order {order.id} is '{order.status}', not awaiting assignment.")
            return AssignmentOutcome.failure(AllocationError.INVALID_ORDER_STATE, order_id=order.id)
        if order.delivery_location is None:
            return AssignmentOutcome.failure(AllocationError.INVALID_LOCATION, order_id=order.id)
        return None

    def _rank_by_distance(
        self,
        origin: Coordinate,
        vendors: Sequence[VendorSnapshot],
        radius_km: Optional[float] = None,
    ) -> List[Tuple[float, VendorSnapshot]]:
        """
        Pair vendors with their distance from ``origin`` and keep those in range.

        The range is each vendor's own service radius unless ``radius_km`` is
        given. Sorted by distance, ties broken by ascending vendor id.
        """
        located = []
        for vendor in vendors:
            if vendor.location is None:
                logger.debug(f"Vendor {vendor.id} has no known location. Skipping.")
                continue
            located.append(vendor)

        distances = distances_from(origin, [vendor.location for vendor in located])

        in_range = []
        for vendor, distance in zip(located, distances):
            limit = vendor.service_radius_km if radius_km is None else radius_km
            if distance <= limit:
                in_range.append((float(distance), vendor))

        in_range.sort(key=lambda pair: (pair[0], pair[1].id))
        return in_range

    def _notify_vendor(self, vendor_id, order_id, result: AllocationResult, estimated_delivery_time: datetime) -> bool:
        payload = {
            "order_id": order_id,
            "distance_km": round(result.distance_km, 2),
            "estimated_minutes": result.estimated_minutes,
            "estimated_delivery_time": estimated_delivery_time.isoformat(),
        }
        try:
            self.notifier.notify(vendor_id, EVENT_NEW_ORDER, payload)
        except Exception as e:
            # The assignment is already committed; delivery retries belong to the notification pipeline
            logger.error(f"Failed to notify vendor {vendor_id} about order {order_id}: {e}", exc_info=True)
            return False
        return True

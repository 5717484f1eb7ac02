from datetime import datetime
from typing import Iterable, List, Optional

from allocation.core.types import Coordinate, OrderSnapshot, VendorSnapshot


class AllocationStore:
    """
    Persistence operations the allocation engine depends on.

    Implementations raise ``StoreUnavailableError`` for infrastructure
    failures and return None/False for missing rows. A spatially indexed
    store may narrow ``list_eligible_vendors`` as long as it never drops a
    vendor that could serve the order.
    """

    def list_eligible_vendors(self, online_only: bool = True, verified_only: bool = True) -> List[VendorSnapshot]:
        raise NotImplementedError

    def get_order(self, order_id) -> Optional[OrderSnapshot]:
        raise NotImplementedError

    def get_vendor(self, vendor_id) -> Optional[VendorSnapshot]:
        raise NotImplementedError

    def list_orders(self, vendor_id, statuses: Iterable[str]) -> List[OrderSnapshot]:
        raise NotImplementedError

    def update_order_assignment(self, order_id, vendor_id, estimated_delivery_time: datetime, status: str) -> bool:
        """Assign only if the order is still unassigned. Returns False when nothing was updated."""
        raise NotImplementedError

    def update_vendor_location(self, vendor_id, location: Coordinate) -> bool:
        """Overwrite the vendor's position. Returns False when the vendor does not exist."""
        raise NotImplementedError

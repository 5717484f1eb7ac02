"""
Core data types for vendor allocation.

These are immutable value objects. They carry no database identity of their
own and validate their fields at construction time, so the engine can trust
every coordinate and stock figure it is handed.
"""
import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from allocation.core.constants import (
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
)


def _to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if math.isnan(result) or math.isinf(result):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return result


@dataclass(frozen=True)
class Coordinate:
    """
    A point on the earth's surface in decimal degrees.
    """
    latitude: float
    longitude: float

    def __post_init__(self):
        # Convert to float if strings or Decimals were provided
        latitude = _to_float(self.latitude, "latitude")
        longitude = _to_float(self.longitude, "longitude")
        if not MIN_LATITUDE <= latitude <= MAX_LATITUDE:
            raise ValueError(f"latitude must be within [{MIN_LATITUDE}, {MAX_LATITUDE}], got {latitude}")
        if not MIN_LONGITUDE <= longitude <= MAX_LONGITUDE:
            raise ValueError(f"longitude must be within [{MIN_LONGITUDE}, {MAX_LONGITUDE}], got {longitude}")
        object.__setattr__(self, 'latitude', latitude)
        object.__setattr__(self, 'longitude', longitude)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> 'Coordinate':
        """
        Build a coordinate from the JSON form stored on addresses.

        Accepts either ``{"lat": .., "lng": ..}`` or
        ``{"latitude": .., "longitude": ..}``.
        """
        if not data:
            raise ValueError("Location data is missing")
        lat = data.get('lat', data.get('latitude'))
        lng = data.get('lng', data.get('longitude'))
        if lat is None or lng is None:
            raise ValueError("Location must include lat/lng")
        return cls(latitude=lat, longitude=lng)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True)
class InventoryLine:
    """One brand/size a vendor carries, with its current stock level."""
    brand: str
    stock: int
    is_available: bool = True
    size: str = ""

    def __post_init__(self):
        if self.stock is None or int(self.stock) < 0:
            raise ValueError(f"stock for brand {self.brand!r} must be non-negative, got {self.stock!r}")
        object.__setattr__(self, 'stock', int(self.stock))

    @property
    def is_in_stock(self) -> bool:
        return self.stock > 0 and self.is_available


@dataclass(frozen=True)
class VendorSnapshot:
    """
    Point-in-time view of a vendor as read by the allocation engine.

    ``location`` is None when the vendor has never reported a position.
    """
    id: int
    name: str
    location: Optional[Coordinate]
    service_radius_km: float
    is_online: bool = True
    is_verified: bool = True
    inventory: Tuple[InventoryLine, ...] = ()

    def __post_init__(self):
        radius = _to_float(self.service_radius_km, "service_radius_km")
        if radius <= 0:
            raise ValueError(f"service_radius_km must be positive, got {radius}")
        object.__setattr__(self, 'service_radius_km', radius)
        object.__setattr__(self, 'inventory', tuple(self.inventory))

    @property
    def has_location(self) -> bool:
        return self.location is not None

    def stocks_all(self, brands: Iterable[str]) -> bool:
        """True if every brand has an available inventory line with stock left."""
        in_stock = {line.brand for line in self.inventory if line.is_in_stock}
        return all(brand in in_stock for brand in brands)


@dataclass(frozen=True)
class OrderLine:
    brand: str
    quantity: int
    size: str = ""
    price: Decimal = Decimal("0")

    def __post_init__(self):
        if self.quantity is None or int(self.quantity) <= 0:
            raise ValueError(f"quantity for brand {self.brand!r} must be positive, got {self.quantity!r}")
        object.__setattr__(self, 'quantity', int(self.quantity))
        object.__setattr__(self, 'price', Decimal(str(self.price)))


@dataclass(frozen=True)
class OrderSnapshot:
    """
    Point-in-time view of an order.

    ``delivery_location`` is None when the stored address has no usable
    coordinates; such an order cannot be allocated.
    """
    id: int
    delivery_location: Optional[Coordinate]
    items: Tuple[OrderLine, ...] = ()
    vendor_id: Optional[int] = None
    status: str = 'pending'
    customer_id: str = ""
    created_at: Optional[datetime] = None
    estimated_delivery_time: Optional[datetime] = None

    def __post_init__(self):
        object.__setattr__(self, 'items', tuple(self.items))

    @property
    def required_brands(self) -> FrozenSet[str]:
        return frozenset(item.brand for item in self.items)

    @property
    def is_assigned(self) -> bool:
        return self.vendor_id is not None


class AllocationError(str, Enum):
    """Reasons an allocation operation did not succeed."""
    ORDER_NOT_FOUND = 'order_not_found'
    VENDOR_NOT_FOUND = 'vendor_not_found'
    NO_VENDORS_AVAILABLE = 'no_vendors_available'
    NO_STOCK_AVAILABLE = 'no_stock_available'
    NO_VENDORS_IN_AREA = 'no_vendors_in_area'
    ALREADY_ASSIGNED = 'already_assigned'
    INVALID_ORDER_STATE = 'invalid_order_state'
    INVALID_LOCATION = 'invalid_location'
    STORE_UNAVAILABLE = 'store_unavailable'

    @property
    def is_retryable(self) -> bool:
        # Only infrastructure failures are worth retrying; business-rule failures are final
        return self is AllocationError.STORE_UNAVAILABLE

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    AllocationError.ORDER_NOT_FOUND: "Order not found",
    AllocationError.VENDOR_NOT_FOUND: "Vendor not found",
    AllocationError.NO_VENDORS_AVAILABLE: "No vendors available at the moment",
    AllocationError.NO_STOCK_AVAILABLE: "No vendors have the requested brands in stock",
    AllocationError.NO_VENDORS_IN_AREA: "No vendors available in your area",
    AllocationError.ALREADY_ASSIGNED: "Order is already assigned to a vendor",
    AllocationError.INVALID_ORDER_STATE: "Order is not awaiting assignment",
    AllocationError.INVALID_LOCATION: "Delivery address has no valid coordinates",
    AllocationError.STORE_UNAVAILABLE: "Storage is temporarily unavailable",
}


class StoreUnavailableError(Exception):
    """Raised by stores when the underlying persistence layer fails."""


@dataclass
class AllocationResult:
    """Result of a nearest-vendor search. Exactly one of ``vendor`` or ``error`` is set."""
    vendor: Optional[VendorSnapshot] = None
    distance_km: Optional[float] = None
    estimated_minutes: Optional[int] = None
    error: Optional[AllocationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.vendor is not None

    @staticmethod
    def failure(error: AllocationError) -> 'AllocationResult':
        return AllocationResult(error=error)


@dataclass
class AssignmentOutcome:
    """Result of a state-changing engine operation (assignment, location update)."""
    success: bool
    error: Optional[AllocationError] = None
    order_id: Optional[int] = None
    vendor_id: Optional[int] = None
    distance_km: Optional[float] = None
    estimated_minutes: Optional[int] = None
    estimated_delivery_time: Optional[datetime] = None
    notified: bool = False

    @staticmethod
    def failure(error: AllocationError, **kwargs) -> 'AssignmentOutcome':
        return AssignmentOutcome(success=False, error=error, **kwargs)


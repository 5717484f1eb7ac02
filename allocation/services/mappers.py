import logging
from typing import Optional

from allocation.core.types import (
    Coordinate,
    InventoryLine,
    OrderLine,
    OrderSnapshot,
    VendorSnapshot,
)

logger = logging.getLogger(__name__)


def map_vendor_location(vendor_model) -> Optional[Coordinate]:
    if vendor_model.latitude is None or vendor_model.longitude is None:
        return None
    try:
        return Coordinate(latitude=vendor_model.latitude, longitude=vendor_model.longitude)
    except ValueError as e:
        logger.warning(f"Vendor {vendor_model.pk} has an invalid stored location: {e}. Treating as unknown.")
        return None


def map_vendor_model(vendor_model) -> VendorSnapshot:
    """
    Raises ValueError when the row cannot form a valid snapshot
    (e.g. a non-positive service radius written around model validation).
    """
    inventory = tuple(
        InventoryLine(
            brand=line.brand,
            size=line.size,
            stock=line.stock,
            is_available=line.is_available,
        )
        for line in vendor_model.inventory.all()
    )

    return VendorSnapshot(
        id=vendor_model.pk,
        name=vendor_model.name,
        location=map_vendor_location(vendor_model),
        service_radius_km=vendor_model.service_radius_km,
        is_online=vendor_model.is_online,
        is_verified=vendor_model.is_verified,
        inventory=inventory,
    )


def map_delivery_location(order_model) -> Optional[Coordinate]:
    try:
        return Coordinate.from_mapping(order_model.delivery_address)
    except (ValueError, AttributeError) as e:
        logger.warning(f"Order {order_model.pk} has no usable delivery coordinates: {e}")
        return None


def map_order_lines(order_model):
    lines = []
    for item in order_model.items.all():
        try:
            lines.append(OrderLine(brand=item.brand, size=item.size, quantity=item.quantity, price=item.price))
        except ValueError as e:
            logger.warning(f"Order {order_model.pk}: skipping invalid item {item.pk}: {e}")
    return tuple(lines)


def map_order_model(order_model) -> OrderSnapshot:
    return OrderSnapshot(
        id=order_model.pk,
        delivery_location=map_delivery_location(order_model),
        items=map_order_lines(order_model),
        vendor_id=order_model.vendor_id,
        status=order_model.status,
        customer_id=order_model.customer_id,
        created_at=order_model.created_at,
        estimated_delivery_time=order_model.estimated_delivery_time,
    )

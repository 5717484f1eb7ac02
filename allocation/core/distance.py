"""
Distance utilities for vendor allocation.

This module provides the great-circle distance model used to decide whether a
customer lies inside a vendor's service area and which vendor is closest.
"""
import math
from typing import Any, Sequence

import numpy as np

from allocation.core.constants import (
    DEFAULT_AVERAGE_SPEED_KMH,
    DEFAULT_PREPARATION_MINUTES,
    EARTH_RADIUS_KM,
)
from allocation.core.types import Coordinate


def haversine_km(lat1: Any, lon1: Any, lat2: Any, lon2: Any) -> Any:
    """
    Calculate the great circle distance between two points
    on the earth (specified in decimal degrees).

    Works element-wise, so any argument may be a numpy array.

    Args:
        lat1, lon1: Coordinates of first point
        lat2, lon2: Coordinates of second point

    Returns:
        Distance in kilometers (float or numpy array)
    """
    lat1, lon1, lat2, lon2 = map(np.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    h = np.clip(h, 0.0, 1.0)

    return 2 * EARTH_RADIUS_KM * np.arctan2(np.sqrt(h), np.sqrt(1 - h))


def calculate_distance(a: Coordinate, b: Coordinate) -> float:
    """
    Great-circle distance between two coordinates in kilometers.

    Symmetric, and exactly 0.0 for identical points.
    """
    return float(haversine_km(a.latitude, a.longitude, b.latitude, b.longitude))


def distances_from(origin: Coordinate, coordinates: Sequence[Coordinate]) -> np.ndarray:
    """
    Distances from ``origin`` to each coordinate, in input order.

    Args:
        origin: Reference point (e.g. the customer's delivery address).
        coordinates: Points to measure to.

    Returns:
        1-D numpy array of distances in kilometers.
    """
    if not coordinates:
        return np.array([], dtype=float)

    lats = np.array([c.latitude for c in coordinates], dtype=float)
    lngs = np.array([c.longitude for c in coordinates], dtype=float)
    return haversine_km(origin.latitude, origin.longitude, lats, lngs)


def validate_coordinate(latitude: Any, longitude: Any) -> Coordinate:
    """Validate raw latitude/longitude input. Raises ValueError when out of range."""
    if latitude is None or longitude is None:
        raise ValueError("Latitude and longitude are required")
    return Coordinate(latitude=latitude, longitude=longitude)


def estimate_delivery_minutes(
    distance_km: float,
    average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
    preparation_minutes: int = DEFAULT_PREPARATION_MINUTES,
) -> int:
    """
    Estimate minutes until delivery: travel time at the average speed,
    rounded up to the next whole minute, plus the preparation buffer.
    """
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be positive")
    return math.ceil(distance_km / average_speed_kmh * 60) + preparation_minutes

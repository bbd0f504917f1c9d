"""Geospatial helper functions."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from ..models.domain import Coordinates

EARTH_RADIUS_KM = 6371.0
_TWO_PLACES = Decimal("0.01")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def round_km(value: float) -> float:
    """Round half-up to two decimal places; non-finite values pass through."""

    if not math.isfinite(value):
        return value
    return float(Decimal(repr(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def distance_km(origin: Coordinates, destination: Coordinates) -> float:
    """Straight-line distance in kilometres between two points, rounded to 2 decimals.

    Returns NaN when any coordinate is not finite; callers must check before
    trusting the result.
    """

    values = (origin.latitude, origin.longitude, destination.latitude, destination.longitude)
    if not all(math.isfinite(value) for value in values):
        return math.nan
    raw = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
    return round_km(raw)

"""Coordinate resolution services."""

from .cache import CoordinateCache
from .nominatim_client import NominatimGeocoder
from .resolver import CoordinateResolver, get_coordinate_resolver, normalize_postal_code
from .viacep_client import ViaCepClient

__all__ = [
    "CoordinateCache",
    "CoordinateResolver",
    "NominatimGeocoder",
    "ViaCepClient",
    "get_coordinate_resolver",
    "normalize_postal_code",
]

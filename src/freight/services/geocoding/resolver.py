"""Postal code and address resolution to coordinates."""

from __future__ import annotations

import asyncio
import logging
import re
from functools import lru_cache
from typing import Protocol

from ...config import settings
from ...models.domain import Coordinates, PostalAddress
from .cache import CoordinateCache
from .nominatim_client import NominatimGeocoder
from .viacep_client import ViaCepClient

POSTAL_CODE_LENGTH = 8
_NON_DIGITS = re.compile(r"\D")

logger = logging.getLogger(__name__)


class PostalLookup(Protocol):
    async def lookup(self, postal_code: str) -> PostalAddress | None: ...


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Coordinates | None: ...


def normalize_postal_code(code: str | None) -> str | None:
    """Strip everything but digits; return ``None`` unless exactly 8 remain."""
    if not code:
        return None
    digits = _NON_DIGITS.sub("", str(code))
    if len(digits) != POSTAL_CODE_LENGTH:
        return None
    return digits


class CoordinateResolver:
    """Resolves postal codes (cached) and free-text addresses (uncached) to coordinates.

    Every failure, from a malformed CEP to a provider outage, comes back as
    ``None``. Concurrent requests for the same CEP share one pending lookup.
    """

    def __init__(
        self,
        postal_lookup: PostalLookup | None = None,
        geocoder: Geocoder | None = None,
        cache: CoordinateCache | None = None,
        country: str | None = None,
    ) -> None:
        self.postal_lookup = postal_lookup if postal_lookup is not None else ViaCepClient()
        self.geocoder = geocoder if geocoder is not None else NominatimGeocoder()
        self.cache = cache if cache is not None else CoordinateCache()
        self.country = country or settings.geocoding_country
        self._in_flight: dict[str, asyncio.Future[Coordinates | None]] = {}

    async def resolve_address(self, address: str) -> Coordinates | None:
        try:
            return await self.geocoder.geocode(address)
        except Exception as e:
            logger.warning(f"Address geocoding failed for '{address}': {e!r}")
            return None

    async def resolve_postal_code(self, code: str) -> Coordinates | None:
        normalized = normalize_postal_code(code)
        if normalized is None:
            logger.info(f"Rejected malformed postal code {code!r}")
            return None

        cached = self.cache.get(normalized)
        if cached is not None:
            logger.debug(f"Coordinate cache hit for CEP {normalized}")
            return cached

        pending = self._in_flight.get(normalized)
        if pending is None:
            pending = asyncio.ensure_future(self._resolve_uncached(normalized))
            self._in_flight[normalized] = pending
            pending.add_done_callback(lambda done, key=normalized: self._forget(key, done))
        else:
            logger.debug(f"Joining in-flight lookup for CEP {normalized}")

        # Shielded so one caller's cancellation does not abort the shared lookup.
        return await asyncio.shield(pending)

    def clear_cache(self) -> int:
        return self.cache.clear()

    def _forget(self, key: str, future: asyncio.Future) -> None:
        if self._in_flight.get(key) is future:
            del self._in_flight[key]

    async def _resolve_uncached(self, postal_code: str) -> Coordinates | None:
        try:
            address = await self.postal_lookup.lookup(postal_code)
            if address is None:
                return None

            query = address.to_query(self.country)
            coordinates = await self.geocoder.geocode(query)
            if coordinates is None:
                return None
        except Exception as e:
            logger.warning(f"Postal code resolution failed for CEP {postal_code}: {e!r}")
            return None

        self.cache.set(postal_code, coordinates)
        logger.info(f"Resolved CEP {postal_code} to ({coordinates.latitude}, {coordinates.longitude})")
        return coordinates


@lru_cache()
def get_coordinate_resolver() -> CoordinateResolver:
    """Process-wide resolver, so every request shares one coordinate cache."""
    return CoordinateResolver()

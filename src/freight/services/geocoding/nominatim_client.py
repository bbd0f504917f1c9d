"""Nominatim (OpenStreetMap) client: free-text address to coordinates."""

from __future__ import annotations

import logging
import math

import httpx

from ...config import settings
from ...models.domain import Coordinates
from .http import LookupClient

logger = logging.getLogger(__name__)


class NominatimGeocoder(LookupClient):
    def __init__(self, base_url: str | None = None, user_agent: str | None = None, **kwargs) -> None:
        # Nominatim's usage policy requires an identifying User-Agent.
        headers = {"User-Agent": user_agent or settings.geocoding_user_agent}
        super().__init__(base_url or settings.nominatim_base_url, headers=headers, **kwargs)

    async def geocode(self, address: str) -> Coordinates | None:
        """Return the first match for ``address`` or ``None`` if nothing usable came back."""
        if not address or not address.strip():
            return None

        params = {"q": address, "format": "json", "limit": 1}
        try:
            results = await self._get_json("/search", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Geocoding request failed for '{address}': {e!r}")
            return None
        except ValueError as e:
            logger.warning(f"Geocoding returned invalid JSON for '{address}': {e}")
            return None

        if not isinstance(results, list) or not results:
            logger.info(f"Geocoding found no result for '{address}'")
            return None

        first = results[0]
        try:
            latitude = float(first["lat"])
            longitude = float(first["lon"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Malformed geocoding result for '{address}': {e!r}")
            return None

        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            logger.warning(f"Non-finite coordinates for '{address}': {latitude}, {longitude}")
            return None

        logger.debug(f"Geocoded '{address}' to ({latitude}, {longitude})")
        return Coordinates(latitude=latitude, longitude=longitude)

"""Store and delivery band data access backed by Supabase."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Optional

from supabase import AsyncClient

from ..config import settings
from ..db.supabase import get_supabase_client
from ..models.domain import DeliveryBand, Store
from ..services.freight.bands import (
    BandValidationError,
    default_band_name,
    ensure_unique_radius,
    validate_band_values,
)

logger = logging.getLogger(__name__)


class StoreDataUnavailable(RuntimeError):
    """The store data store is not configured or cannot be reached."""


def _coerce_float(value: Any) -> float:
    if value is None or value == "":
        raise ValueError("missing numeric value")
    try:
        return float(str(value).replace(",", "."))
    except ValueError as exc:
        raise ValueError(f"Unable to parse float from value '{value}'") from exc


def _row_to_band(row: dict) -> DeliveryBand:
    return DeliveryBand(
        id=str(row["id"]) if row.get("id") is not None else None,
        store_id=str(row["store_id"]) if row.get("store_id") is not None else None,
        radius_km=_coerce_float(row.get("radius_km")),
        delivery_price=_coerce_float(row.get("delivery_price")),
        name=str(row.get("name") or "").strip() or None,
    )


class StoreRepository:
    """Reads stores and reads/writes their delivery bands."""

    def __init__(
        self,
        client_factory: Callable[[], Awaitable[Optional[AsyncClient]]] = get_supabase_client,
        stores_table: str | None = None,
        bands_table: str | None = None,
    ) -> None:
        self._client_factory = client_factory
        self.stores_table = stores_table or settings.stores_table
        self.bands_table = bands_table or settings.bands_table

    async def _client(self) -> AsyncClient:
        client = await self._client_factory()
        if not client:
            raise StoreDataUnavailable("Supabase is not configured")
        return client

    async def get_store(self, store_id: str) -> Store | None:
        client = await self._client()
        response = await client.table(self.stores_table).select("id, address").eq("id", store_id).limit(1).execute()
        if not response.data:
            return None
        row = response.data[0]
        address = row.get("address")
        return Store(id=str(row["id"]), address=address.strip() if isinstance(address, str) else None)

    async def list_bands(self, store_id: str) -> list[DeliveryBand]:
        """Bands of a store, ascending by radius as returned by the data store."""
        client = await self._client()
        response = await (
            client.table(self.bands_table)
            .select("*")
            .eq("store_id", store_id)
            .order("radius_km", desc=False)
            .execute()
        )

        bands: list[DeliveryBand] = []
        for row in response.data or []:
            try:
                bands.append(_row_to_band(row))
            except (KeyError, ValueError, TypeError) as e:
                # Skip invalid rows but continue processing
                logger.warning(f"Skipping invalid delivery band row {row.get('id')}: {e}")
        return bands

    async def get_band(self, band_id: str) -> DeliveryBand | None:
        client = await self._client()
        response = await client.table(self.bands_table).select("*").eq("id", band_id).limit(1).execute()
        if not response.data:
            return None
        return _row_to_band(response.data[0])

    async def create_band(
        self,
        store_id: str,
        radius_km: float,
        delivery_price: float,
        name: str | None = None,
    ) -> DeliveryBand:
        validate_band_values(radius_km, delivery_price)
        existing = await self.list_bands(store_id)
        ensure_unique_radius(radius_km, existing)

        payload = {
            "store_id": store_id,
            "name": (name or "").strip() or default_band_name(radius_km),
            "radius_km": radius_km,
            "delivery_price": delivery_price,
        }
        client = await self._client()
        response = await client.table(self.bands_table).insert(payload).execute()
        if not response.data:
            raise StoreDataUnavailable("Delivery band insert returned no row")
        logger.info(f"Created delivery band for store {store_id}: {payload}")
        return _row_to_band(response.data[0])

    async def update_band(self, band_id: str, radius_km: float, delivery_price: float) -> DeliveryBand | None:
        validate_band_values(radius_km, delivery_price)
        current = await self.get_band(band_id)
        if current is None:
            return None
        if current.store_id is None:
            raise BandValidationError(f"Delivery band {band_id} is not linked to a store")
        siblings = await self.list_bands(current.store_id)
        ensure_unique_radius(radius_km, siblings, exclude_id=band_id)

        client = await self._client()
        response = await (
            client.table(self.bands_table)
            .update({"radius_km": radius_km, "delivery_price": delivery_price})
            .eq("id", band_id)
            .execute()
        )
        if not response.data:
            return None
        logger.info(f"Updated delivery band {band_id}: radius={radius_km} km, price={delivery_price}")
        return _row_to_band(response.data[0])

    async def delete_band(self, band_id: str) -> bool:
        client = await self._client()
        response = await client.table(self.bands_table).delete().eq("id", band_id).execute()
        deleted = bool(response.data)
        if deleted:
            logger.info(f"Deleted delivery band {band_id}")
        return deleted

"""Delivery fee resolution for a store and destination postal code."""

from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import Protocol, Sequence

from ...data.stores_repository import StoreRepository
from ...models.domain import Coordinates, DeliveryBand, FreightCalculation, FreightFailure, Store
from ..geocoding.resolver import CoordinateResolver, get_coordinate_resolver
from ..geospatial import distance_km
from .bands import match_band, max_radius, normalize_bands

logger = logging.getLogger(__name__)


class StoreSource(Protocol):
    async def get_store(self, store_id: str) -> Store | None: ...

    async def list_bands(self, store_id: str) -> Sequence[DeliveryBand]: ...


class FreightService:
    def __init__(
        self,
        stores: StoreSource | None = None,
        resolver: CoordinateResolver | None = None,
    ) -> None:
        self.stores = stores if stores is not None else StoreRepository()
        self.resolver = resolver if resolver is not None else get_coordinate_resolver()

    async def calculate_freight(self, store_id: str, destination_postal_code: str) -> FreightCalculation:
        """Price delivery from ``store_id`` to ``destination_postal_code``.

        Never raises: every failure is reported through the returned
        ``FreightCalculation`` with ``price`` left as ``None``.
        """
        try:
            return await self._calculate(store_id, destination_postal_code)
        except Exception as e:
            logger.exception(f"Unexpected error calculating freight for store {store_id}: {e}")
            return FreightCalculation.failed(FreightFailure.UNEXPECTED)

    async def _calculate(self, store_id: str, destination_postal_code: str) -> FreightCalculation:
        try:
            store = await self.stores.get_store(store_id)
        except Exception as e:
            logger.error(f"Error fetching store {store_id}: {e!r}")
            store = None
        if store is None:
            return FreightCalculation.failed(FreightFailure.STORE_NOT_FOUND)

        if not store.address or not store.address.strip():
            logger.error(f"Store {store_id} has no registered address")
            return FreightCalculation.failed(FreightFailure.STORE_WITHOUT_ADDRESS)

        origin = await self.resolver.resolve_address(store.address)
        if origin is None:
            return FreightCalculation.failed(FreightFailure.STORE_UNRESOLVED)

        destination = await self.resolver.resolve_postal_code(destination_postal_code)
        if destination is None:
            return FreightCalculation.failed(FreightFailure.DESTINATION_UNRESOLVED)

        distance = self._distance(origin, destination)
        if distance is None:
            return FreightCalculation.failed(FreightFailure.DISTANCE_ERROR)

        try:
            raw_bands = await self.stores.list_bands(store_id)
        except Exception as e:
            logger.error(f"Error fetching delivery bands for store {store_id}: {e!r}")
            raw_bands = []
        bands = normalize_bands(raw_bands)
        if not bands:
            return FreightCalculation.failed(FreightFailure.NO_BANDS, distance_km=distance)

        return self.price_for_distance(distance, bands)

    @staticmethod
    def _distance(origin: Coordinates, destination: Coordinates) -> float | None:
        distance = distance_km(origin, destination)
        if math.isnan(distance) or distance < 0:
            logger.error(f"Invalid distance {distance} between {origin} and {destination}")
            return None
        return distance

    @staticmethod
    def price_for_distance(distance: float, bands: Sequence[DeliveryBand]) -> FreightCalculation:
        """Match ``distance`` against ascending ``bands``.

        The outer limit is checked before walking the bands so the common
        "too far" case never depends on the loop falling through.
        """
        limit = max_radius(bands)
        if distance > limit:
            logger.info(f"Distance {distance} km exceeds delivery limit of {limit} km")
            return FreightCalculation.out_of_area(distance)

        band = match_band(distance, bands)
        if band is None:
            logger.warning(f"Distance {distance} km matched no band despite being within {limit} km")
            return FreightCalculation.out_of_area(distance)

        logger.info(f"Distance {distance} km matched band {band.id} ({band.radius_km} km) at {band.delivery_price}")
        return FreightCalculation.priced(band, distance)


@lru_cache()
def get_freight_service() -> FreightService:
    return FreightService()

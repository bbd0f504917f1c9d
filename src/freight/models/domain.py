"""Domain models for stores, delivery bands and freight results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class PostalAddress:
    """Structured address returned by the postal code lookup."""

    postal_code: str
    street: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None

    def to_query(self, country: str) -> str:
        parts = [self.street, self.neighborhood, self.city, self.state, country]
        return ", ".join(part.strip() for part in parts if part and part.strip())


@dataclass(slots=True)
class Store:
    id: str
    address: Optional[str]


@dataclass(slots=True)
class DeliveryBand:
    """A store-configured distance tier: destinations up to ``radius_km`` pay ``delivery_price``."""

    radius_km: float
    delivery_price: float
    name: Optional[str] = None
    id: Optional[str] = None
    store_id: Optional[str] = None


class FreightStatus(str, Enum):
    PRICED = "priced"
    OUT_OF_AREA = "out_of_area"
    FAILED = "failed"


class FreightFailure(str, Enum):
    """Why a destination could not be priced; the value is the user-facing reason."""

    STORE_NOT_FOUND = "store not found"
    STORE_WITHOUT_ADDRESS = "store has no registered address"
    STORE_UNRESOLVED = "could not resolve store coordinates"
    DESTINATION_UNRESOLVED = "invalid or unfound destination postal code"
    DISTANCE_ERROR = "distance computation error"
    NO_BANDS = "no delivery bands configured for this store"
    OUT_OF_AREA = "out of delivery area"
    UNEXPECTED = "freight calculation error"


@dataclass(slots=True)
class FreightCalculation:
    """Outcome of a freight request.

    ``price`` is ``None`` on every non-priced outcome, so callers can treat a
    missing price as the universal failure signal and inspect ``in_area`` and
    ``error`` to explain why.
    """

    status: FreightStatus
    price: Optional[float] = None
    in_area: bool = False
    distance_km: Optional[float] = None
    band: Optional[DeliveryBand] = None
    failure: Optional[FreightFailure] = None

    @property
    def error(self) -> Optional[str]:
        return self.failure.value if self.failure else None

    @classmethod
    def priced(cls, band: DeliveryBand, distance_km: float) -> "FreightCalculation":
        return cls(
            status=FreightStatus.PRICED,
            price=band.delivery_price,
            in_area=True,
            distance_km=distance_km,
            band=band,
        )

    @classmethod
    def out_of_area(cls, distance_km: float) -> "FreightCalculation":
        return cls(
            status=FreightStatus.OUT_OF_AREA,
            distance_km=distance_km,
            failure=FreightFailure.OUT_OF_AREA,
        )

    @classmethod
    def failed(cls, failure: FreightFailure, distance_km: Optional[float] = None) -> "FreightCalculation":
        return cls(status=FreightStatus.FAILED, distance_km=distance_km, failure=failure)

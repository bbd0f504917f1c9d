"""Freight and delivery band request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import DeliveryBand, FreightCalculation, FreightFailure, FreightStatus


class FreightRequest(BaseModel):
    store_id: str = Field(..., min_length=1)
    postal_code: str = Field(..., description="Destination CEP; punctuation is ignored.")


class DeliveryBandModel(BaseModel):
    id: Optional[str] = None
    store_id: Optional[str] = None
    name: Optional[str] = None
    radius_km: float
    delivery_price: float

    @classmethod
    def from_domain(cls, band: DeliveryBand) -> "DeliveryBandModel":
        return cls(
            id=band.id,
            store_id=band.store_id,
            name=band.name,
            radius_km=band.radius_km,
            delivery_price=band.delivery_price,
        )


class FreightResponse(BaseModel):
    status: FreightStatus
    price: Optional[float] = None
    in_area: bool
    distance_km: Optional[float] = None
    band: Optional[DeliveryBandModel] = None
    failure: Optional[FreightFailure] = None
    error: Optional[str] = None

    @classmethod
    def from_domain(cls, result: FreightCalculation) -> "FreightResponse":
        return cls(
            status=result.status,
            price=result.price,
            in_area=result.in_area,
            distance_km=result.distance_km,
            band=DeliveryBandModel.from_domain(result.band) if result.band else None,
            failure=result.failure,
            error=result.error,
        )


class BandCreateRequest(BaseModel):
    radius_km: float = Field(..., description="Upper distance bound of the band, in km.")
    delivery_price: float
    name: Optional[str] = None


class BandUpdateRequest(BaseModel):
    radius_km: float
    delivery_price: float


class BandListItem(DeliveryBandModel):
    range_label: str


class BandListResponse(BaseModel):
    store_id: str
    items: List[BandListItem]


class CacheClearResponse(BaseModel):
    cleared: int

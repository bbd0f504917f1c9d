"""Freight calculation endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status

from ...schemas.freight import CacheClearResponse, FreightRequest, FreightResponse
from ...services.freight.service import get_freight_service
from ...services.geocoding.resolver import get_coordinate_resolver

router = APIRouter(prefix="/freight", tags=["freight"])


@router.post("/calculate", response_model=FreightResponse, status_code=status.HTTP_200_OK)
async def calculate(payload: FreightRequest) -> FreightResponse:
    """Price delivery to a postal code.

    Unavailable delivery is a normal outcome: it comes back with 200, a null
    ``price`` and the reason in ``error``.
    """
    result = await get_freight_service().calculate_freight(payload.store_id, payload.postal_code)
    return FreightResponse.from_domain(result)


@router.delete("/cache", response_model=CacheClearResponse, status_code=status.HTTP_200_OK)
def clear_cache() -> CacheClearResponse:
    """Forget every cached postal code resolution."""
    cleared = get_coordinate_resolver().clear_cache()
    logging.info(f"Cleared {cleared} cached postal code coordinates")
    return CacheClearResponse(cleared=cleared)

"""Delivery band management endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...data.stores_repository import StoreDataUnavailable, StoreRepository
from ...schemas.freight import (
    BandCreateRequest,
    BandListItem,
    BandListResponse,
    BandUpdateRequest,
    DeliveryBandModel,
)
from ...services.freight.bands import describe_band_ranges

router = APIRouter(tags=["bands"])


def get_store_repository() -> StoreRepository:
    return StoreRepository()


def _unavailable(exc: StoreDataUnavailable) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/stores/{store_id}/bands", response_model=BandListResponse, status_code=status.HTTP_200_OK)
async def list_bands(store_id: str) -> BandListResponse:
    try:
        bands = await get_store_repository().list_bands(store_id)
    except StoreDataUnavailable as exc:
        raise _unavailable(exc) from exc
    except Exception as exc:
        logging.exception(f"Error listing delivery bands: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to list delivery bands: {str(exc)}"
        ) from exc

    labels = describe_band_ranges(bands)
    items = [
        BandListItem(**DeliveryBandModel.from_domain(band).model_dump(), range_label=label)
        for band, label in zip(bands, labels)
    ]
    return BandListResponse(store_id=store_id, items=items)


@router.post("/stores/{store_id}/bands", response_model=DeliveryBandModel, status_code=status.HTTP_201_CREATED)
async def create_band(store_id: str, payload: BandCreateRequest) -> DeliveryBandModel:
    try:
        band = await get_store_repository().create_band(
            store_id,
            radius_km=payload.radius_km,
            delivery_price=payload.delivery_price,
            name=payload.name,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreDataUnavailable as exc:
        raise _unavailable(exc) from exc
    except Exception as exc:
        logging.exception(f"Error creating delivery band: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create delivery band: {str(exc)}"
        ) from exc
    return DeliveryBandModel.from_domain(band)


@router.patch("/bands/{band_id}", response_model=DeliveryBandModel, status_code=status.HTTP_200_OK)
async def update_band(band_id: str, payload: BandUpdateRequest) -> DeliveryBandModel:
    try:
        band = await get_store_repository().update_band(
            band_id,
            radius_km=payload.radius_km,
            delivery_price=payload.delivery_price,
        )
        if band is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Delivery band {band_id} not found"
            )
    except HTTPException:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except StoreDataUnavailable as exc:
        raise _unavailable(exc) from exc
    except Exception as exc:
        logging.exception(f"Error updating delivery band: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update delivery band: {str(exc)}"
        ) from exc
    return DeliveryBandModel.from_domain(band)


@router.delete("/bands/{band_id}", status_code=status.HTTP_200_OK)
async def delete_band(band_id: str) -> dict:
    try:
        deleted = await get_store_repository().delete_band(band_id)
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Delivery band {band_id} not found"
            )
        return {
            "success": True,
            "message": f"Delivery band {band_id} removed"
        }
    except HTTPException:
        raise
    except StoreDataUnavailable as exc:
        raise _unavailable(exc) from exc
    except Exception as exc:
        logging.exception(f"Error deleting delivery band: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete delivery band: {str(exc)}"
        ) from exc

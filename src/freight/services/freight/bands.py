"""Distance band matching and band configuration rules."""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from ...models.domain import DeliveryBand

logger = logging.getLogger(__name__)


class BandValidationError(ValueError):
    """Raised when a band write would leave the store with an invalid configuration."""


def match_band(distance_km: float, bands: Sequence[DeliveryBand]) -> DeliveryBand | None:
    """Return the band covering ``distance_km`` from bands sorted by ascending radius.

    Band ``i`` covers ``[radius[i-1], radius[i]]`` (the first starts at 0). Both
    ends are inclusive and the first match wins, so a distance sitting exactly
    on a boundary is charged at the lower band.
    """
    lower_bound = 0.0
    for band in bands:
        if lower_bound <= distance_km <= band.radius_km:
            return band
        lower_bound = band.radius_km
    return None


def max_radius(bands: Sequence[DeliveryBand]) -> float:
    return bands[-1].radius_km


def _is_usable(band: DeliveryBand) -> bool:
    return (
        math.isfinite(band.radius_km)
        and band.radius_km > 0
        and math.isfinite(band.delivery_price)
        and band.delivery_price >= 0
    )


def normalize_bands(bands: Iterable[DeliveryBand]) -> list[DeliveryBand]:
    """Drop unusable bands and make sure the rest are in ascending radius order.

    The data store is asked for ascending order already; anything else is
    logged and corrected here rather than trusted.
    """
    usable: list[DeliveryBand] = []
    for band in bands:
        if not _is_usable(band):
            logger.warning(f"Ignoring invalid delivery band {band.id}: radius={band.radius_km}, price={band.delivery_price}")
            continue
        usable.append(band)

    ordered = sorted(usable, key=lambda band: band.radius_km)
    if [band.radius_km for band in ordered] != [band.radius_km for band in usable]:
        logger.warning("Delivery bands were not in ascending radius order; re-sorted")

    for previous, current in zip(ordered, ordered[1:]):
        if current.radius_km <= previous.radius_km:
            logger.warning(
                f"Delivery bands {previous.id} and {current.id} share radius {current.radius_km} km; "
                f"band {current.id} can never be matched"
            )
    return ordered


def validate_band_values(radius_km: float, delivery_price: float) -> None:
    if radius_km is None or not math.isfinite(radius_km) or radius_km <= 0:
        raise BandValidationError("Maximum distance must be greater than zero")
    if delivery_price is None or not math.isfinite(delivery_price) or delivery_price < 0:
        raise BandValidationError("Delivery price must be greater than or equal to zero")


def ensure_unique_radius(
    radius_km: float,
    existing: Iterable[DeliveryBand],
    exclude_id: str | None = None,
) -> None:
    """Reject a radius already used by another band of the same store."""
    for band in existing:
        if exclude_id is not None and band.id == exclude_id:
            continue
        if math.isclose(band.radius_km, radius_km, rel_tol=0.0, abs_tol=1e-9):
            raise BandValidationError(f"A delivery band with radius {_format_km(radius_km)} km already exists")


def default_band_name(radius_km: float) -> str:
    return f"Faixa até {_format_km(radius_km)} km"


def describe_band_ranges(bands: Sequence[DeliveryBand]) -> list[str]:
    """Human-readable range per band, e.g. ``["0 - 5 km", "5.00 - 10 km"]``."""
    labels: list[str] = []
    for index, band in enumerate(bands):
        if index == 0:
            labels.append(f"0 - {_format_km(band.radius_km)} km")
        else:
            labels.append(f"{bands[index - 1].radius_km:.2f} - {_format_km(band.radius_km)} km")
    return labels


def _format_km(value: float) -> str:
    return f"{value:g}"

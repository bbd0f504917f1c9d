import math

import pytest

from src.freight.models.domain import DeliveryBand, FreightFailure, FreightStatus
from src.freight.services.freight.bands import (
    BandValidationError,
    default_band_name,
    describe_band_ranges,
    ensure_unique_radius,
    match_band,
    normalize_bands,
    validate_band_values,
)
from src.freight.services.freight.service import FreightService


def _bands() -> list[DeliveryBand]:
    return [
        DeliveryBand(id="b1", radius_km=5.0, delivery_price=5.0),
        DeliveryBand(id="b2", radius_km=10.0, delivery_price=8.0),
    ]


@pytest.mark.parametrize(
    "distance, expected_band, expected_price",
    [
        (0.0, "b1", 5.0),
        (3.2, "b1", 5.0),
        (5.0, "b1", 5.0),
        (5.01, "b2", 8.0),
        (10.0, "b2", 8.0),
    ],
)
def test_distance_is_priced_by_first_covering_band(distance, expected_band, expected_price):
    result = FreightService.price_for_distance(distance, _bands())

    assert result.status is FreightStatus.PRICED
    assert result.in_area is True
    assert result.band.id == expected_band
    assert result.price == expected_price
    assert result.distance_km == distance
    assert result.error is None


def test_distance_beyond_last_band_is_out_of_area():
    result = FreightService.price_for_distance(10.01, _bands())

    assert result.status is FreightStatus.OUT_OF_AREA
    assert result.price is None
    assert result.in_area is False
    assert result.distance_km == 10.01
    assert result.failure is FreightFailure.OUT_OF_AREA
    assert result.error == "out of delivery area"


def test_match_band_returns_none_outside_every_band():
    assert match_band(12.0, _bands()) is None
    assert match_band(-1.0, _bands()) is None


def test_single_band_covers_from_zero():
    bands = [DeliveryBand(id="only", radius_km=3.0, delivery_price=0.0)]

    assert match_band(0.0, bands).id == "only"
    assert FreightService.price_for_distance(3.0, bands).price == 0.0


def test_normalize_bands_sorts_and_drops_invalid_rows():
    bands = [
        DeliveryBand(id="far", radius_km=10.0, delivery_price=8.0),
        DeliveryBand(id="zero", radius_km=0.0, delivery_price=1.0),
        DeliveryBand(id="near", radius_km=5.0, delivery_price=5.0),
        DeliveryBand(id="negative-price", radius_km=7.0, delivery_price=-1.0),
        DeliveryBand(id="nan", radius_km=math.nan, delivery_price=1.0),
    ]

    normalized = normalize_bands(bands)

    assert [band.id for band in normalized] == ["near", "far"]


def test_duplicate_radius_keeps_earlier_band_reachable():
    bands = normalize_bands(
        [
            DeliveryBand(id="first", radius_km=5.0, delivery_price=5.0),
            DeliveryBand(id="dup", radius_km=5.0, delivery_price=9.0),
        ]
    )

    assert match_band(5.0, bands).id == "first"


def test_describe_band_ranges():
    bands = _bands() + [DeliveryBand(id="b3", radius_km=12.5, delivery_price=10.0)]

    assert describe_band_ranges(bands) == ["0 - 5 km", "5.00 - 10 km", "10.00 - 12.5 km"]


def test_default_band_name():
    assert default_band_name(5.0) == "Faixa até 5 km"
    assert default_band_name(2.5) == "Faixa até 2.5 km"


@pytest.mark.parametrize(
    "radius, price",
    [(0.0, 5.0), (-2.0, 5.0), (math.inf, 5.0), (5.0, -0.01), (5.0, math.nan)],
)
def test_validate_band_values_rejects_invalid_configuration(radius, price):
    with pytest.raises(BandValidationError):
        validate_band_values(radius, price)


def test_validate_band_values_accepts_free_delivery():
    validate_band_values(2.0, 0.0)


def test_ensure_unique_radius():
    existing = _bands()

    with pytest.raises(BandValidationError, match="already exists"):
        ensure_unique_radius(5.0, existing)

    ensure_unique_radius(5.0, existing, exclude_id="b1")
    ensure_unique_radius(7.5, existing)

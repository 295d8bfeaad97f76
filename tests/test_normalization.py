from __future__ import annotations

import math

import pytest

from fleettrack.ingestion.normalize import (
    extract_payload_timestamp,
    is_sentinel,
    normalize_timestamp_seconds,
)


@pytest.mark.parametrize("value", [None, "", "  ", "--", "NaN", "null", math.nan])
def test_sentinels(value: object) -> None:
    assert is_sentinel(value)


@pytest.mark.parametrize("value", [0, 0.0, False, "0", "Van", [], {}])
def test_real_values_are_not_sentinels(value: object) -> None:
    assert not is_sentinel(value)


def test_normalize_timestamp_seconds() -> None:
    assert normalize_timestamp_seconds(1_770_928_447) == 1_770_928_447
    assert normalize_timestamp_seconds(1_770_928_447_000) == pytest.approx(1_770_928_447)
    assert normalize_timestamp_seconds("1770928447") == 1_770_928_447
    assert normalize_timestamp_seconds(0) is None
    assert normalize_timestamp_seconds("") is None
    assert normalize_timestamp_seconds("yesterday") is None


def test_extract_payload_timestamp_key_order() -> None:
    assert extract_payload_timestamp({"timestamp": 100}) == 100
    assert extract_payload_timestamp({"time": 200}) == 200
    assert extract_payload_timestamp({"updatedAt": 300}) == 300
    assert extract_payload_timestamp({"timestamp": 100, "time": 200}) == 100
    assert extract_payload_timestamp({"speed": 10}) is None

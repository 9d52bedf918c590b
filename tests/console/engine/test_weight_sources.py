from __future__ import annotations

import random
from decimal import Decimal

import pytest

from bascula_console.engine import (
    FixedWeightSource,
    RandomWeightSource,
    SequenceWeightSource,
    WeightSource,
    auto_folio,
    get_profile,
)
from bascula_console.engine.weight_source import SIMULATED_TARE_RANGE


def test_random_source_stays_in_range_with_two_decimals() -> None:
    source = RandomWeightSource(*SIMULATED_TARE_RANGE, rng=random.Random(4))

    readings = [source.read() for _ in range(50)]

    assert all(Decimal("0.50") <= reading <= Decimal("2.00") for reading in readings)
    assert all(reading == reading.quantize(Decimal("0.01")) for reading in readings)


def test_random_source_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        RandomWeightSource(Decimal("5"), Decimal("1"))


def test_fixed_and_sequence_sources() -> None:
    fixed = FixedWeightSource(Decimal("12.345"))
    sequence = SequenceWeightSource(["1.2", 3])

    assert fixed.read() == Decimal("12.35")
    assert isinstance(sequence, WeightSource)
    assert sequence.read() == Decimal("1.20")
    assert sequence.read() == Decimal("3.00")
    with pytest.raises(RuntimeError):
        sequence.read()


def test_auto_folio_uses_last_four_digits() -> None:
    assert auto_folio(1_715_000_004_321) == "AUTO-4321"


def test_get_profile_rejects_unknown_key() -> None:
    assert get_profile("outbound").has_area_routing
    with pytest.raises(ValueError):
        get_profile("dock")

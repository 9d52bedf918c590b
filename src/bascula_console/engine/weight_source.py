"""Scale readings.

The station only needs ``read() -> Decimal``. A serial/USB driver for the
real scale plugs in here with the same synchronous contract; until then the
console runs on the simulated sources below.
"""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Protocol, runtime_checkable

from bascula_client_sdk import to_kg


@runtime_checkable
class WeightSource(Protocol):
    def read(self) -> Decimal:
        ...


@dataclass
class RandomWeightSource:
    low: Decimal
    high: Decimal
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self) -> None:
        self.low = to_kg(self.low)
        self.high = to_kg(self.high)
        if self.low < 0 or self.high < self.low:
            raise ValueError(f"Invalid simulated range: {self.low}..{self.high}")

    def read(self) -> Decimal:
        return to_kg(self.rng.uniform(float(self.low), float(self.high)))


@dataclass
class FixedWeightSource:
    value: Decimal

    def read(self) -> Decimal:
        return to_kg(self.value)


class SequenceWeightSource:
    """Replays readings in order; used for keyed-in weights and in tests."""

    def __init__(self, values: Iterable[Decimal | float | str]) -> None:
        self._values: deque[Decimal] = deque(to_kg(value) for value in values)

    def push(self, value: Decimal | float | str) -> None:
        self._values.append(to_kg(value))

    def remaining(self) -> int:
        return len(self._values)

    def read(self) -> Decimal:
        if not self._values:
            raise RuntimeError("No more readings queued on the scale")
        return self._values.popleft()


# Ranges the facility uses while the scale driver is not wired in.
SIMULATED_TARE_RANGE = (Decimal("0.50"), Decimal("2.00"))
SIMULATED_GROSS_RANGE = (Decimal("15.00"), Decimal("55.00"))
SIMULATED_WASHING_RANGE = (Decimal("2.00"), Decimal("22.00"))

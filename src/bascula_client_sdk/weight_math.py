"""Tare/net arithmetic shared by the console and the lot payload builder.

All quantities are kilograms held as ``Decimal`` with two decimal places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

KG_QUANTUM = Decimal("0.01")
ZERO_KG = Decimal("0.00")


def to_kg(value: Decimal | float | int | str | None) -> Decimal:
    """Coerce a reading to a two-decimal ``Decimal``.

    Floats go through ``str`` so that ``15.7`` stays ``15.70`` instead of
    carrying binary noise. ``None`` and blank strings count as zero.
    """
    if value is None:
        return ZERO_KG
    if isinstance(value, str):
        value = value.strip() or "0"
    try:
        raw = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid weight value: {value!r}") from exc
    if not raw.is_finite():
        raise ValueError(f"Invalid weight value: {value!r}")
    return raw.quantize(KG_QUANTUM, rounding=ROUND_HALF_UP)


def net_weight(gross: Decimal | float | str, tare: Decimal | float | str) -> Decimal:
    return max(ZERO_KG, to_kg(gross) - to_kg(tare))


def total_kg(values: Iterable[Decimal | float | str]) -> Decimal:
    return to_kg(sum((to_kg(value) for value in values), ZERO_KG))


def format_kg(value: Decimal | float | str | None) -> str:
    return f"{to_kg(value):.2f}"

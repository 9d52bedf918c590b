from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from bascula_console.engine import PROFILES
from bascula_console.engine.weight_source import SIMULATED_GROSS_RANGE, SIMULATED_TARE_RANGE

SCALE_MODES = ("simulated", "fixed")


class ConsoleConfigError(ValueError):
    """Raised when station configuration is missing or malformed."""


@dataclass(frozen=True)
class ConsoleConfig:
    api_token: str | None = None
    station_id: str | None = None
    operator_id: str | None = None
    operator_profile: str | None = None
    default_screen: str = "reception"
    scale_mode: str = "simulated"
    fixed_weight_kg: Decimal = Decimal("0.00")
    tare_range: tuple[Decimal, Decimal] = SIMULATED_TARE_RANGE
    gross_range: tuple[Decimal, Decimal] = SIMULATED_GROSS_RANGE
    telemetry_enabled: bool = False


def _read_kg(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConsoleConfigError(f"Invalid {name}: expected kilograms, got {raw!r}") from exc
    if value < 0:
        raise ConsoleConfigError(f"Invalid {name}: expected >= 0, got {raw!r}")
    return value


def _read_range(low_name: str, high_name: str, default: tuple[Decimal, Decimal]) -> tuple[Decimal, Decimal]:
    low = _read_kg(low_name, default[0])
    high = _read_kg(high_name, default[1])
    if high < low:
        raise ConsoleConfigError(f"Invalid {high_name}: must be >= {low_name} ({high} < {low})")
    return low, high


def _optional(name: str) -> str | None:
    value = (os.getenv(name) or "").strip()
    return value or None


def load_console_config(env_file: str | None = None) -> ConsoleConfig:
    load_dotenv(env_file)

    scale_mode = (os.getenv("BASCULA_SCALE_MODE") or "simulated").strip().lower()
    if scale_mode not in SCALE_MODES:
        raise ConsoleConfigError(f"Invalid BASCULA_SCALE_MODE: expected one of {SCALE_MODES}, got {scale_mode!r}")

    default_screen = (os.getenv("BASCULA_DEFAULT_SCREEN") or "reception").strip().lower()
    if default_screen not in PROFILES:
        raise ConsoleConfigError(f"Invalid BASCULA_DEFAULT_SCREEN: expected one of {sorted(PROFILES)}, got {default_screen!r}")

    fixed_weight = _read_kg("BASCULA_SCALE_FIXED_KG", Decimal("0.00"))
    if scale_mode == "fixed" and fixed_weight <= 0:
        raise ConsoleConfigError("BASCULA_SCALE_FIXED_KG must be > 0 when BASCULA_SCALE_MODE=fixed")

    telemetry_raw = (os.getenv("BASCULA_TELEMETRY_ENABLED") or "0").strip().lower()

    return ConsoleConfig(
        api_token=_optional("BASCULA_API_TOKEN"),
        station_id=_optional("BASCULA_STATION_ID"),
        operator_id=_optional("BASCULA_OPERATOR_ID"),
        operator_profile=_optional("BASCULA_OPERATOR_PROFILE"),
        default_screen=default_screen,
        scale_mode=scale_mode,
        fixed_weight_kg=fixed_weight,
        tare_range=_read_range("BASCULA_TARE_MIN_KG", "BASCULA_TARE_MAX_KG", SIMULATED_TARE_RANGE),
        gross_range=_read_range("BASCULA_GROSS_MIN_KG", "BASCULA_GROSS_MAX_KG", SIMULATED_GROSS_RANGE),
        telemetry_enabled=telemetry_raw in {"1", "true", "yes", "on"},
    )

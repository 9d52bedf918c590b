from __future__ import annotations

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class StationProfile:
    """What differs between the reception, washing and outbound screens."""

    key: str
    title: str
    has_review_stage: bool = False
    has_area_routing: bool = False
    requires_tare_per_item: bool = True
    auto_folio: bool = False
    preselect_defaults: bool = False
    base_products_only: bool = True


RECEPTION = StationProfile(
    key="reception",
    title="Reception",
    has_review_stage=True,
)

WASHING = StationProfile(
    key="washing",
    title="Washing and cleaning",
    base_products_only=False,
)

OUTBOUND = StationProfile(
    key="outbound",
    title="Outbound weighing",
    has_area_routing=True,
    auto_folio=True,
    preselect_defaults=True,
)

PROFILES: dict[str, StationProfile] = {profile.key: profile for profile in (RECEPTION, WASHING, OUTBOUND)}


def get_profile(key: str) -> StationProfile:
    try:
        return PROFILES[key]
    except KeyError as exc:
        raise ValueError(f"Unknown station profile: {key!r}") from exc


def auto_folio(now_ms: int | None = None) -> str:
    stamp = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    return f"AUTO-{str(stamp)[-4:]}"

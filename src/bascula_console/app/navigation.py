from __future__ import annotations

from dataclasses import dataclass

from bascula_console.app.state import Route
from bascula_console.engine import OUTBOUND, RECEPTION, WASHING, StationProfile


@dataclass(frozen=True)
class ScreenSpec:
    route: Route
    profile: StationProfile
    shortcut: str

    @property
    def label(self) -> str:
        return self.profile.title


SCREEN_SPECS: tuple[ScreenSpec, ...] = (
    ScreenSpec(Route.RECEPTION, RECEPTION, "F1"),
    ScreenSpec(Route.WASHING, WASHING, "F2"),
    ScreenSpec(Route.OUTBOUND, OUTBOUND, "F3"),
)


def screen_for(route: Route | str) -> ScreenSpec:
    key = Route(route)
    return next(spec for spec in SCREEN_SPECS if spec.route is key)


def navigation_labels() -> list[str]:
    return [f"{spec.shortcut} {spec.label}" for spec in SCREEN_SPECS]

from __future__ import annotations

import logging
from dataclasses import dataclass

from bascula_client_sdk import ApiSession, ClientConfig, load_config

from bascula_console.app.navigation import navigation_labels, screen_for
from bascula_console.app.state import AppState, Route
from bascula_console.config import ConsoleConfig, load_console_config
from bascula_console.engine import (
    WASHING,
    FixedWeightSource,
    OperatorContext,
    RandomWeightSource,
    StationProfile,
    WeightSource,
)
from bascula_console.engine.weight_source import SIMULATED_GROSS_RANGE, SIMULATED_WASHING_RANGE
from bascula_console.services import CatalogService, LotsService
from bascula_console.shared.telemetry import TelemetryLogger
from bascula_console.ui.operations import WeighingStationView, build_station_view

logger = logging.getLogger(__name__)


@dataclass
class BootstrapResult:
    route: Route
    error_message: str | None = None


class ConsoleBootstrap:
    def __init__(
        self,
        config: ClientConfig | None = None,
        console_config: ConsoleConfig | None = None,
        session: ApiSession | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.console_config = console_config or load_console_config()
        self.session = session or ApiSession(
            self.config,
            token=self.console_config.api_token,
            station_id=self.console_config.station_id,
        )
        self.state = AppState(
            route=Route(self.console_config.default_screen),
            operator=OperatorContext(
                user_id=self.console_config.operator_id,
                profile=self.console_config.operator_profile,
                station_id=self.console_config.station_id,
            ),
        )
        self.catalog_service = CatalogService(self.session)
        self.lots_service = LotsService(self.session)
        self.telemetry = telemetry or TelemetryLogger(
            app_name="bascula_console",
            station_id=self.console_config.station_id,
            enabled=self.console_config.telemetry_enabled,
        )
        self._views: dict[Route, WeighingStationView] = {}

    def start(self) -> BootstrapResult:
        return self.open_screen(self.state.route)

    def open_screen(self, route: Route | str) -> BootstrapResult:
        spec = screen_for(route)
        view = self.view(spec.route)
        outcome = view.mount()
        self._navigate(spec.route, spec.label)
        if not outcome["ok"]:
            self.state.error_message = outcome["error"]
            self.state.trace_id = outcome.get("trace_id")
            return BootstrapResult(route=self.state.route, error_message=self.state.error_message)
        self.state.error_message = None
        return BootstrapResult(route=self.state.route)

    def view(self, route: Route | str) -> WeighingStationView:
        spec = screen_for(route)
        if spec.route not in self._views:
            weight_source, tare_source = self.weight_sources(spec.profile)
            self._views[spec.route] = build_station_view(
                spec.profile,
                catalog_source=self.catalog_service,
                committer=self.lots_service,
                weight_source=weight_source,
                tare_source=tare_source,
                operator=self.state.operator,
                telemetry=self.telemetry,
            )
        return self._views[spec.route]

    def weight_sources(self, profile: StationProfile) -> tuple[WeightSource, WeightSource]:
        cfg = self.console_config
        if cfg.scale_mode == "fixed":
            return FixedWeightSource(cfg.fixed_weight_kg), FixedWeightSource(cfg.tare_range[0])
        gross_low, gross_high = cfg.gross_range
        if profile is WASHING and cfg.gross_range == SIMULATED_GROSS_RANGE:
            gross_low, gross_high = SIMULATED_WASHING_RANGE
        tare_low, tare_high = cfg.tare_range
        return RandomWeightSource(gross_low, gross_high), RandomWeightSource(tare_low, tare_high)

    def visible_navigation(self) -> list[str]:
        return navigation_labels()

    def _navigate(self, route: Route, status_message: str) -> None:
        logger.info("navigation", extra={"route": route.value})
        self.state.route = route
        self.state.status_message = status_message

from __future__ import annotations

from bascula_console.engine import (
    CatalogCache,
    LotFinalizer,
    OperatorContext,
    StationProfile,
    WeighingSession,
    WeightSource,
)
from bascula_console.engine.catalog import CatalogSource
from bascula_console.engine.finalizer import LotCommitter
from bascula_console.shared.telemetry import TelemetryLogger
from bascula_console.ui.operations.station_view import WeighingStationView


def build_station_view(
    profile: StationProfile,
    *,
    catalog_source: CatalogSource,
    committer: LotCommitter,
    weight_source: WeightSource,
    tare_source: WeightSource | None = None,
    operator: OperatorContext | None = None,
    telemetry: TelemetryLogger | None = None,
) -> WeighingStationView:
    catalog = CatalogCache(catalog_source, base_only=profile.base_products_only)
    session = WeighingSession(
        profile,
        catalog,
        weight_source,
        tare_source=tare_source,
        operator=operator,
    )
    return WeighingStationView(session=session, finalizer=LotFinalizer(session, committer), telemetry=telemetry)

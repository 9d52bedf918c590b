from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable

from bascula_client_sdk import LotDetail, ProductRow, ProviderRow, format_kg


class SessionStatus(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    REVIEWING = "reviewing"
    FINALIZING = "finalizing"
    CLOSED = "closed"


@dataclass(frozen=True)
class Provider:
    id: int | str
    legal_name: str

    @classmethod
    def from_row(cls, row: ProviderRow) -> "Provider":
        return cls(id=row.id, legal_name=row.legal_name)


@dataclass(frozen=True)
class Product:
    id: int | str
    name: str
    unit: str
    is_base_product: bool = True

    @classmethod
    def from_row(cls, row: ProductRow) -> "Product":
        return cls(id=row.id, name=row.name, unit=row.unit, is_base_product=row.is_base_product)


@dataclass(frozen=True)
class Area:
    id: int
    name: str
    routing_tag: str


DEFAULT_AREAS: tuple[Area, ...] = (
    Area(id=1, name="Limpieza", routing_tag="cleaning"),
    Area(id=2, name="Subproductos", routing_tag="byproducts"),
    Area(id=3, name="Venta", routing_tag="sale"),
)


@dataclass(frozen=True)
class OperatorContext:
    """Who is running the station; replaces reading the user from ambient storage."""

    user_id: int | str | None = None
    profile: str | None = None
    station_id: str | None = None


@dataclass
class SessionHeader:
    provider: Provider | None = None
    folio: str = ""
    notes: str = ""
    status: SessionStatus = SessionStatus.SETUP

    def copy(self) -> "SessionHeader":
        return SessionHeader(provider=self.provider, folio=self.folio, notes=self.notes, status=self.status)


@dataclass(frozen=True)
class WeighingRecord:
    id: int
    product_id: int | str
    product_name: str
    unit: str
    gross: Decimal
    tare: Decimal
    net: Decimal
    captured_at: datetime
    area: Area | None = None

    @property
    def hour(self) -> str:
        return self.captured_at.strftime("%H:%M")

    def to_detail(self) -> LotDetail:
        return LotDetail(
            id=self.id,
            product_id=self.product_id,
            product_name=self.product_name,
            unit=self.unit,
            gross_kg=self.gross,
            tare_kg=self.tare,
            net_kg=self.net,
            area=self.area.name if self.area else None,
            captured_at=self.hour,
        )

    def render(self) -> dict[str, object]:
        return {
            "id": self.id,
            "product": self.product_name,
            "unit": self.unit,
            "gross": format_kg(self.gross),
            "tare": format_kg(self.tare),
            "net": format_kg(self.net),
            "area": self.area.name if self.area else None,
            "area_tag": self.area.routing_tag if self.area else None,
            "hour": self.hour,
        }


@dataclass
class RecordIdFactory:
    """Millisecond clock ids, bumped so two captures in the same ms never collide."""

    clock: Callable[[], int] = time.time_ns
    _last: int = 0

    def next_id(self) -> int:
        candidate = self.clock() // 1_000_000
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bascula_console.engine import OperatorContext


class Route(str, Enum):
    RECEPTION = "reception"
    WASHING = "washing"
    OUTBOUND = "outbound"


@dataclass
class AppState:
    route: Route = Route.RECEPTION
    error_message: str | None = None
    status_message: str = "Ready"
    trace_id: str | None = None
    operator: OperatorContext = field(default_factory=OperatorContext)

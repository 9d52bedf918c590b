from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from bascula_client_sdk import format_kg, net_weight


@dataclass
class ScaleDisplay:
    tare: Decimal
    gross: Decimal
    product_selected: bool

    def render(self) -> dict[str, Any]:
        net = net_weight(self.gross, self.tare)
        return {
            "tare": format_kg(self.tare),
            "gross": format_kg(self.gross),
            "net": format_kg(net),
            "tare_set": self.tare > 0,
            "can_capture_gross": self.tare > 0,
            "can_register": self.product_selected and net > 0,
        }

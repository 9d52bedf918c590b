from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from bascula_client_sdk import format_kg, total_kg

from bascula_console.engine.models import WeighingRecord


@dataclass
class LedgerTable:
    records: Sequence[WeighingRecord]

    def render(self) -> dict[str, Any]:
        return {
            "count": len(self.records),
            "total_kg": format_kg(total_kg(record.net for record in self.records)),
            "rows": [record.render() for record in self.records],
        }

from __future__ import annotations

from collections import deque
from decimal import Decimal
from typing import Iterator

from bascula_client_sdk import total_kg

from bascula_console.engine.models import WeighingRecord


class RecordLedger:
    """Completed records of the open lot, newest first."""

    def __init__(self) -> None:
        self._records: deque[WeighingRecord] = deque()

    def add(self, record: WeighingRecord) -> None:
        self._records.appendleft(record)

    def remove_by_id(self, record_id: int) -> bool:
        for record in self._records:
            if record.id == record_id:
                self._records.remove(record)
                return True
        return False

    def total(self) -> Decimal:
        return total_kg(record.net for record in self._records)

    def clear(self) -> None:
        self._records.clear()

    def snapshot(self) -> tuple[WeighingRecord, ...]:
        return tuple(self._records)

    def is_empty(self) -> bool:
        return not self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[WeighingRecord]:
        return iter(tuple(self._records))

from __future__ import annotations

import json
import os
import sys
from collections import Counter
from datetime import date
from pathlib import Path
from typing import Callable, TextIO

from .events import TelemetryEvent

DEFAULT_LOG_DIR = Path("artifacts") / "telemetry"


class TelemetryLogger:
    """Appends station events as JSON lines.

    Without an explicit ``log_file`` each station writes one file per day
    (``<station>-<YYYY-MM-DD>.jsonl``) so a shift can be pulled on its own.
    """

    def __init__(
        self,
        *,
        app_name: str,
        station_id: str | None = None,
        enabled: bool | None = None,
        log_dir: str | Path | None = None,
        log_file: str | Path | None = None,
        stdout_sink: bool = False,
        stdout_stream: TextIO | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.app_name = app_name
        self.station_id = station_id
        self.enabled = enabled if enabled is not None else _env_telemetry_enabled()
        self.log_dir = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
        self.log_file = Path(log_file) if log_file else None
        self.stdout_sink = stdout_sink
        self.stdout_stream = stdout_stream
        self.today = today
        self.counts: Counter[str] = Counter()

    @property
    def emitted(self) -> int:
        return sum(self.counts.values())

    def path_for_today(self) -> Path:
        if self.log_file is not None:
            return self.log_file
        return self.log_dir / f"{self.station_id or self.app_name}-{self.today().isoformat()}.jsonl"

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False

        payload = event.to_dict()
        payload["app_name"] = self.app_name
        if self.station_id:
            payload["station_id"] = self.station_id
        line = json.dumps(payload, sort_keys=True, default=str)

        target = self.path_for_today()
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("a", encoding="utf-8") as fp:
            fp.write(f"{line}\n")

        if self.stdout_sink:
            stream = self.stdout_stream or sys.stdout
            stream.write(f"{line}\n")
            stream.flush()

        self.counts[event.category] += 1
        return True


def _env_telemetry_enabled() -> bool:
    value = os.getenv("BASCULA_TELEMETRY_ENABLED", "0").strip().lower()
    return value in {"1", "true", "yes", "on"}

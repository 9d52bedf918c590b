from __future__ import annotations

import json
import logging
from datetime import datetime, timezone


def get_logger(name: str) -> logging.Logger:
    """Audit logger that prints one bare JSON line per record."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_action(
    logger: logging.Logger,
    *,
    module: str,
    action: str,
    operator_id: int | str | None,
    station_id: str | None,
    folio: str | None,
    trace_id: str | None,
    outcome: str,
) -> None:
    logger.info(
        json.dumps(
            {
                "ts": datetime.now(timezone.utc).isoformat(),
                "level": "INFO",
                "module": module,
                "action": action,
                "operator_id": operator_id,
                "station_id": station_id,
                "folio": folio,
                "trace_id": trace_id,
                "outcome": outcome,
            },
            default=str,
        )
    )

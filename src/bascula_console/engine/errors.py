from __future__ import annotations


class WeighingError(Exception):
    """Base class for every rejection raised by the weighing engine.

    None of these are fatal: the engine either refused the command without
    touching its state or rolled back to the last stable state (Active).
    """

    code = "WEIGHING_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(WeighingError):
    code = "SESSION_FIELDS_REQUIRED"

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class CatalogUnavailableError(WeighingError):
    code = "CATALOG_UNAVAILABLE"


class TareNotSetError(WeighingError):
    code = "TARE_NOT_SET"


class InvalidWeightError(WeighingError):
    code = "INVALID_WEIGHT"


class NoProductSelectedError(WeighingError):
    code = "NO_PRODUCT_SELECTED"


class EmptyLotError(WeighingError):
    code = "EMPTY_LOT"


class FinalizationInProgressError(WeighingError):
    code = "FINALIZATION_IN_PROGRESS"


class InvalidTransitionError(WeighingError):
    code = "INVALID_TRANSITION"


class StationBusyError(WeighingError):
    code = "STATION_BUSY"


class CommitFailure(WeighingError):
    code = "COMMIT_FAILED"

    def __init__(
        self,
        message: str,
        *,
        details: str | None = None,
        trace_id: str | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(message)
        self.details = details
        self.trace_id = trace_id
        self.retryable = retryable


class ScaleReadError(WeighingError):
    """The weight source failed or returned something that is not a weight."""

    code = "SCALE_READ_FAILED"

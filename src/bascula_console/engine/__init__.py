from .catalog import CatalogCache
from .errors import (
    CatalogUnavailableError,
    CommitFailure,
    EmptyLotError,
    FinalizationInProgressError,
    InvalidTransitionError,
    InvalidWeightError,
    NoProductSelectedError,
    ScaleReadError,
    StationBusyError,
    TareNotSetError,
    ValidationError,
    WeighingError,
)
from .finalizer import LotFinalizer, LotReceipt
from .ledger import RecordLedger
from .models import (
    DEFAULT_AREAS,
    Area,
    OperatorContext,
    Product,
    Provider,
    RecordIdFactory,
    SessionHeader,
    SessionStatus,
    WeighingRecord,
)
from .profiles import OUTBOUND, PROFILES, RECEPTION, WASHING, StationProfile, auto_folio, get_profile
from .session import WeighingSession
from .weight_source import FixedWeightSource, RandomWeightSource, SequenceWeightSource, WeightSource

__all__ = [
    "Area",
    "CatalogCache",
    "CatalogUnavailableError",
    "CommitFailure",
    "DEFAULT_AREAS",
    "EmptyLotError",
    "FinalizationInProgressError",
    "FixedWeightSource",
    "InvalidTransitionError",
    "InvalidWeightError",
    "LotFinalizer",
    "LotReceipt",
    "NoProductSelectedError",
    "OUTBOUND",
    "OperatorContext",
    "PROFILES",
    "Product",
    "Provider",
    "RECEPTION",
    "RandomWeightSource",
    "RecordIdFactory",
    "RecordLedger",
    "ScaleReadError",
    "SequenceWeightSource",
    "SessionHeader",
    "SessionStatus",
    "StationBusyError",
    "StationProfile",
    "TareNotSetError",
    "ValidationError",
    "WASHING",
    "WeighingError",
    "WeighingRecord",
    "WeighingSession",
    "WeightSource",
    "auto_folio",
    "get_profile",
]

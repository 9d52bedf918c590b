from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from .http_client import HttpClient
from .idempotency import IdempotencyKeys, new_idempotency_keys, resolve_idempotency_keys
from .lot_validation import LotValidationError, LotValidationIssue, ensure_valid_lot, validate_lot_payload
from .models_catalog import ProductRow, ProviderRow, rows_from_payload
from .models_lots import LotCommitRequest, LotCommitResponse, LotDetail
from .session import ApiSession
from .tracing import TraceContext
from .ui_errors import UserFacingError, to_user_facing_error
from .weight_math import format_kg, net_weight, to_kg, total_kg

__all__ = [
    "ApiError",
    "ApiSession",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "ForbiddenError",
    "HttpClient",
    "IdempotencyKeys",
    "LotCommitRequest",
    "LotCommitResponse",
    "LotDetail",
    "LotValidationError",
    "LotValidationIssue",
    "NotFoundError",
    "ProductRow",
    "ProviderRow",
    "ServerError",
    "TraceContext",
    "TransportError",
    "UnauthorizedError",
    "UserFacingError",
    "ValidationError",
    "ensure_valid_lot",
    "format_kg",
    "load_config",
    "net_weight",
    "new_idempotency_keys",
    "resolve_idempotency_keys",
    "rows_from_payload",
    "to_kg",
    "to_user_facing_error",
    "total_kg",
    "validate_lot_payload",
]

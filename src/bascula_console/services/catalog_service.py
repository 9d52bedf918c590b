from __future__ import annotations

import logging
from dataclasses import dataclass

from bascula_client_sdk import ApiSession, ProductRow, ProviderRow, to_user_facing_error
from bascula_client_sdk.exceptions import ApiError

logger = logging.getLogger(__name__)


@dataclass
class CatalogServiceError(RuntimeError):
    message: str
    details: str | None = None
    trace_id: str | None = None
    retryable: bool = True

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class CatalogSnapshot:
    providers: list[ProviderRow]
    products: list[ProductRow]


class CatalogService:
    def __init__(self, session: ApiSession) -> None:
        self.session = session

    def load_catalog(self) -> CatalogSnapshot:
        """Providers and products in one go; either both arrive or the load fails."""
        client = self.session.catalog_client()
        try:
            providers = client.list_providers()
            products = client.list_products()
        except Exception as exc:
            error = self._normalize_error(exc)
            logger.warning("catalog_load_failed", extra={"error": error.message, "trace_id": error.trace_id})
            raise error from exc
        logger.info("catalog_loaded", extra={"providers": len(providers), "products": len(products)})
        return CatalogSnapshot(providers=providers, products=products)

    @staticmethod
    def _normalize_error(exc: Exception) -> CatalogServiceError:
        if isinstance(exc, CatalogServiceError):
            return exc
        if isinstance(exc, ApiError):
            user_facing = to_user_facing_error(exc)
            return CatalogServiceError(
                message=user_facing.message,
                details=user_facing.technical_details,
                trace_id=user_facing.trace_id,
                retryable=True,
            )
        return CatalogServiceError(message=str(exc) or "Unexpected catalog client error")

from __future__ import annotations

import logging
from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from ..models_catalog import ProductRow, ProviderRow, rows_from_payload
from .base import BaseClient

logger = logging.getLogger(__name__)

PROVIDERS_PATH = "/api/provedores"
PRODUCTS_PATH = "/api/productos"


@dataclass
class CatalogClient(BaseClient):
    def list_providers(self) -> list[ProviderRow]:
        payload = self._request("GET", PROVIDERS_PATH, module="catalog", operation="list_providers")
        return _parse_rows(rows_from_payload(payload), ProviderRow, "provider")

    def list_products(self) -> list[ProductRow]:
        payload = self._request("GET", PRODUCTS_PATH, module="catalog", operation="list_products")
        return _parse_rows(rows_from_payload(payload), ProductRow, "product")


def _parse_rows(rows, model_type, label: str):
    parsed = []
    for idx, row in enumerate(rows):
        try:
            parsed.append(model_type.model_validate(row))
        except PydanticValidationError:
            logger.warning("catalog_row_skipped", extra={"kind": label, "row_index": idx})
    return parsed

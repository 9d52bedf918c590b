from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

_FALSY_FLAGS = {0, "0", False, "false", "False", None}


class ProviderRow(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | str = Field(alias="IdProveedor")
    legal_name: str = Field(default="", alias="RazonSocial")
    rfc: str | None = Field(default=None, alias="RFC")


class ProductRow(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int | str = Field(alias="IdProducto")
    name: str = Field(default="", alias="Nombre")
    unit: str = Field(default="", alias="UnidadMedida")
    is_subproduct: int | str | bool | None = Field(default=0, alias="EsSubproducto")

    @property
    def is_base_product(self) -> bool:
        return self.is_subproduct in _FALSY_FLAGS


def rows_from_payload(payload: Any) -> list[dict[str, Any]]:
    """Accept either ``{"data": [...]}`` or a bare JSON array."""
    if isinstance(payload, dict):
        payload = payload.get("data")
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError("Expected catalog response to be a JSON array or an object with a 'data' array")
    return [row for row in payload if isinstance(row, dict)]

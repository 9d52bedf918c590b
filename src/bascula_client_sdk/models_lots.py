from __future__ import annotations

from decimal import Decimal

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class LotDetail(BaseModel):
    """One weighing record as the backend stores it under ``detalles``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    product_id: int | str = Field(alias="IdProducto")
    product_name: str = Field(alias="producto")
    unit: str = Field(default="", alias="unidad")
    gross_kg: Decimal = Field(alias="peso_bruto")
    tare_kg: Decimal = Field(alias="tara")
    net_kg: Decimal = Field(alias="peso")
    area: str | None = None
    captured_at: str = Field(alias="hora")


class LotCommitRequest(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    provider_id: int | str = Field(alias="IdProveedor")
    provider_name: str = Field(alias="RazonSocial")
    folio: str
    notes: str = Field(default="", alias="observaciones")
    details: list[LotDetail] = Field(alias="detalles")
    total_kg: Decimal
    operator_id: int | str | None = Field(default=None, alias="idUsuario")

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LotCommitResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    lot_id: int | str | None = Field(default=None, validation_alias=AliasChoices("IdLote", "id", "lot_id"))
    folio: str | None = None
    message: str | None = None
    trace_id: str | None = None

    @field_validator("folio", "message", "trace_id", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Any:
        # Laravel replies are loose: numeric folios, message lists.
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return "; ".join(str(item) for item in value)
        if isinstance(value, (int, float)):
            return str(value)
        return value

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .models_lots import LotCommitRequest
from .weight_math import ZERO_KG, net_weight, to_kg, total_kg


@dataclass(frozen=True)
class LotValidationIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class LotValidationResult:
    ok: bool
    issues: list[LotValidationIssue]
    request: LotCommitRequest | None


class LotValidationError(ValueError):
    def __init__(self, issues: list[LotValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Lot validation failed"
        issue = self.issues[0]
        return f"{issue.field}: {issue.reason}"


def validate_lot_payload(payload: LotCommitRequest | Mapping[str, Any]) -> LotValidationResult:
    if isinstance(payload, LotCommitRequest):
        request = payload
    else:
        try:
            request = LotCommitRequest.model_validate(payload)
        except PydanticValidationError as exc:
            issues = [
                LotValidationIssue(field=".".join(str(part) for part in error["loc"]), reason=error["msg"])
                for error in exc.errors()
            ]
            return LotValidationResult(ok=False, issues=issues, request=None)

    issues: list[LotValidationIssue] = []
    if not str(request.provider_id).strip():
        issues.append(LotValidationIssue(field="IdProveedor", reason="provider is required"))
    if not request.folio.strip():
        issues.append(LotValidationIssue(field="folio", reason="folio is required"))
    if not request.details:
        issues.append(LotValidationIssue(field="detalles", reason="a lot needs at least one weighing record"))

    for idx, detail in enumerate(request.details):
        if to_kg(detail.net_kg) <= ZERO_KG:
            issues.append(LotValidationIssue(field=f"detalles[{idx}].peso", reason="net weight must be greater than 0"))
        elif to_kg(detail.net_kg) != net_weight(detail.gross_kg, detail.tare_kg):
            issues.append(
                LotValidationIssue(field=f"detalles[{idx}].peso", reason="net weight must equal gross minus tare")
            )

    expected_total = total_kg(detail.net_kg for detail in request.details)
    if to_kg(request.total_kg) != expected_total:
        issues.append(
            LotValidationIssue(
                field="total_kg",
                reason=f"total_kg must equal the sum of net weights ({expected_total})",
            )
        )
    return LotValidationResult(ok=not issues, issues=issues, request=request)


def ensure_valid_lot(payload: LotCommitRequest | Mapping[str, Any]) -> LotCommitRequest:
    result = validate_lot_payload(payload)
    if not result.ok or result.request is None:
        raise LotValidationError(result.issues)
    return result.request

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bascula_client_sdk import LotCommitRequest, format_kg, validate_lot_payload

_MAX_NOTES_LENGTH = 500


@dataclass
class FinishLotDialog:
    request: LotCommitRequest
    notes: str = ""
    issues: list[str] = field(default_factory=list)

    def validate(self) -> bool:
        issues = []
        if len(self.notes) > _MAX_NOTES_LENGTH:
            issues.append(f"observaciones: notes must be at most {_MAX_NOTES_LENGTH} characters")
        result = validate_lot_payload(self.request.model_copy(update={"notes": self.notes}))
        issues.extend(f"{issue.field}: {issue.reason}" for issue in result.issues)
        self.issues = issues
        return not issues

    def render(self) -> dict[str, Any]:
        return {
            "provider": self.request.provider_name,
            "folio": self.request.folio,
            "record_count": len(self.request.details),
            "total_kg": format_kg(self.request.total_kg),
            "notes": self.notes,
            "issues": self.issues,
        }

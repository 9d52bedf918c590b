from __future__ import annotations

import re
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

IDEMPOTENCY_HEADER = "Idempotency-Key"
_SLUG_RE = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class IdempotencyKeys:
    transaction_id: str
    idempotency_key: str

    def headers(self) -> dict[str, str]:
        return {IDEMPOTENCY_HEADER: self.idempotency_key}


def _slug(value: str) -> str:
    return _SLUG_RE.sub("-", value.strip().lower()).strip("-") or "lot"


def new_idempotency_key(prefix: str) -> str:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    return f"bascula-{_slug(prefix)}-{ts}-{secrets.token_hex(6)}"


def new_idempotency_keys(prefix: str = "lot") -> IdempotencyKeys:
    return IdempotencyKeys(transaction_id=str(uuid.uuid4()), idempotency_key=new_idempotency_key(prefix))


def resolve_idempotency_keys(
    transaction_id: str | None = None,
    idempotency_key: str | None = None,
    *,
    prefix: str = "lot",
) -> IdempotencyKeys:
    if transaction_id and idempotency_key:
        return IdempotencyKeys(transaction_id=transaction_id, idempotency_key=idempotency_key)
    generated = new_idempotency_keys(prefix)
    return IdempotencyKeys(
        transaction_id=transaction_id or generated.transaction_id,
        idempotency_key=idempotency_key or generated.idempotency_key,
    )

from __future__ import annotations

from dataclasses import dataclass

from bascula_console.engine.errors import CommitFailure


@dataclass(frozen=True)
class RetryPanel:
    """Retry prompt after a lot close that did not reach the server.

    Resending is offered only for transient failures and only while the
    pending idempotency key is known; every resend of the lot carries it.
    """

    folio: str
    idempotency_key: str | None
    failure: CommitFailure | None

    def can_retry(self) -> bool:
        return bool(self.idempotency_key) and self.failure is not None and self.failure.retryable

    def hint(self) -> str | None:
        if self.failure is None:
            return None
        if not self.failure.retryable:
            return f"Lot {self.folio} was rejected; fix it before sending it again."
        if not self.idempotency_key:
            return f"Lot {self.folio} cannot be resent safely; reset the station and weigh again."
        return f"Lot {self.folio} was not saved. The records are kept; press retry."

    def render(self) -> dict[str, object]:
        return {
            "operation": "finish",
            "folio": self.folio,
            "enabled": self.can_retry(),
            "message": self.hint(),
        }

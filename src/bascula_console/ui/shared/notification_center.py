from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

LEVELS = ("info", "success", "warning", "error")


@dataclass
class NotificationCenter:
    """Messages shown in the station's side panel, newest last.

    Pressing a rejected button again (a second "register" with no gross
    weight, say) bumps ``repeat`` on the last message instead of stacking
    copies of it.
    """

    limit: int = 20
    messages: list[dict[str, Any]] = field(default_factory=list)

    def push(self, *, level: str, title: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
        if level not in LEVELS:
            raise ValueError(f"Unknown notification level: {level}")
        last = self.latest()
        if last is not None and (last["level"], last["title"], last["message"]) == (level, title, message):
            last["repeat"] += 1
            last["details"] = details or {}
            return last
        payload = {"level": level, "title": title, "message": message, "details": details or {}, "repeat": 1}
        self.messages.append(payload)
        del self.messages[: -self.limit]
        return payload

    def latest(self) -> dict[str, Any] | None:
        return self.messages[-1] if self.messages else None

    def dismiss_errors(self) -> int:
        """Drop error messages once the lot they refer to has been saved."""
        kept = [message for message in self.messages if message["level"] != "error"]
        dropped = len(self.messages) - len(kept)
        self.messages = kept
        return dropped

    def render(self) -> dict[str, Any]:
        return {
            "count": len(self.messages),
            "errors": sum(1 for message in self.messages if message["level"] == "error"),
            "latest": self.latest(),
            "messages": list(self.messages),
        }

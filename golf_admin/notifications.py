"""User-facing notices collected during a request instead of blocking alerts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

Confirm = Callable[[str], bool]


@dataclass(frozen=True)
class Notice:
    level: str
    message: str


@dataclass
class Notifier:
    notices: list[Notice] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.notices.append(Notice("info", message))

    def error(self, message: str) -> None:
        self.notices.append(Notice("error", message))

    def drain(self) -> list[Notice]:
        """Return the pending notices and forget them."""
        pending, self.notices = self.notices, []
        return pending

    def messages(self) -> list[str]:
        return [notice.message for notice in self.notices]


def always_confirm(_message: str) -> bool:
    return True


def never_confirm(_message: str) -> bool:
    return False


def confirm_from_form(value: str | None) -> Confirm:
    """Build a confirmation callback from a submitted ``confirm`` form field."""
    accepted = (value or "").strip().lower() in {"yes", "true", "1", "on"}
    return lambda _message: accepted

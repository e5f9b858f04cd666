from typing import Any


class AdminError(Exception):
    """Base class for failures surfaced on the admin pages."""


class LoadError(AdminError):
    pass


class MutationError(AdminError):
    pass


class ControllerBusy(MutationError):
    pass


class ValidationSkip(AdminError):
    """Raised before any network call when the user input is incomplete."""


class CsvParseError(AdminError):
    def __init__(self, problems: list[tuple[int, str]]):
        self.problems = problems
        lines = ", ".join(f"line {line}: {reason}" for line, reason in problems)
        super().__init__(f"Malformed CSV rows ({lines})")


class StoreError(Exception):
    def __init__(self, message: str, code: str | None = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details


class MediaApiError(Exception):
    pass

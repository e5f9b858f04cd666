from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from golf_admin.csv_import import parse_golfer_csv, parse_number
from golf_admin.errors import CsvParseError, ValidationSkip
from golf_admin.mirror import Mirror
from golf_admin.notifications import Confirm, Notifier
from golf_admin.settings import DEFAULT_GOLFERS_TABLE
from golf_admin.store import TableStore

logger = logging.getLogger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this golfer?"
CLEAR_PROMPT = "This will delete ALL golfers. Continue?"


@dataclass(frozen=True)
class Golfer:
    id: int
    name: str
    salary: Any

    @classmethod
    def from_row(cls, row: dict) -> "Golfer":
        return cls(id=row["id"], name=row.get("name") or "", salary=row.get("salary"))

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "salary": _plain_number(self.salary)}


def _plain_number(value: Any) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


class GolferRoster:
    def __init__(
        self,
        store: TableStore,
        notifier: Optional[Notifier] = None,
        table: str = DEFAULT_GOLFERS_TABLE,
    ):
        self.store = store
        self.table = table
        self.notifier = notifier or Notifier()
        self.mirror: Mirror[Golfer] = Mirror(
            self._fetch,
            self.notifier,
            convert=Golfer.from_row,
            load_failure="Failed to load golfers",
        )

    @property
    def golfers(self) -> list[Golfer]:
        return self.mirror.items

    @property
    def busy(self) -> bool:
        return self.mirror.busy

    def _fetch(self):
        return self.store.table(self.table).select("*").order("id", ascending=True).execute()

    def load(self) -> list[Golfer]:
        return self.mirror.reload()

    def add_golfer(self, name: str, salary: str) -> None:
        cleaned = (name or "").strip()
        if not cleaned or not (salary or "").strip():
            raise ValidationSkip("Name and salary are required")
        row = {"name": cleaned, "salary": parse_number(salary)}
        self.mirror.mutate(
            lambda: self.store.table(self.table).insert(row).execute(),
            "Insert failed",
        )

    def delete_golfer(self, golfer_id: int, confirm: Confirm) -> bool:
        return self.mirror.mutate(
            lambda: self.store.table(self.table).delete().eq("id", golfer_id).execute(),
            "Delete failed",
            confirm=confirm,
            prompt=DELETE_PROMPT,
        )

    def clear_all(self, confirm: Confirm) -> bool:
        # Store ids start at 1, so this filter matches every row.
        return self.mirror.mutate(
            lambda: self.store.table(self.table).delete().gt("id", 0).execute(),
            "Clear all failed",
            confirm=confirm,
            prompt=CLEAR_PROMPT,
        )

    def import_csv(self, text: Optional[str], *, strict: bool = False) -> int:
        """Insert every row of ``text`` in one batch and return the row count."""
        if text is None:
            self.notifier.error("Choose a CSV file first")
            raise ValidationSkip("Choose a CSV file first")
        try:
            records = parse_golfer_csv(text, strict=strict)
        except CsvParseError as exc:
            logger.warning("CSV upload rejected: %s", exc)
            self.notifier.error(f"CSV upload failed: {exc}")
            raise
        if not records:
            self.notifier.error("CSV upload failed: the file has no golfer rows")
            raise ValidationSkip("The file has no golfer rows")
        self.mirror.mutate(
            lambda: self.store.table(self.table).insert(records).execute(),
            "CSV upload failed",
        )
        return len(records)

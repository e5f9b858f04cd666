"""Golfer CSV parsing.

Rows are ``name,salary``. An optional header line starting with ``name`` is
skipped and blank lines are ignored anywhere in the file.
"""

from __future__ import annotations

import math
import re
from typing import Any

from golf_admin.errors import CsvParseError

HEADER_TOKEN = "name"
LINE_BREAK = re.compile(r"\r\n|\r|\n")
DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
PREFIXED_INTEGER = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
INFINITY = re.compile(r"[+-]?Infinity")


def parse_number(text: str) -> int | float:
    """Coerce ``text`` to a number the way a browser's ``Number()`` does.

    Blank is 0. Decimal, exponent and unsigned ``0x``/``0o``/``0b`` literals
    parse, as does ``Infinity``. Anything else, digit separators and the
    ``inf``/``nan`` spellings included, is NaN.
    """
    cleaned = text.strip()
    if not cleaned:
        return 0
    if PREFIXED_INTEGER.fullmatch(cleaned):
        return int(cleaned, 0)
    if INFINITY.fullmatch(cleaned):
        return -math.inf if cleaned.startswith("-") else math.inf
    if not DECIMAL.fullmatch(cleaned):
        return math.nan
    value = float(cleaned)
    return int(value) if value.is_integer() else value


def _data_lines(text: str) -> list[tuple[int, str]]:
    lines = [
        (number, line.strip())
        for number, line in enumerate(LINE_BREAK.split(text), start=1)
        if line.strip()
    ]
    if lines and lines[0][1].lower().startswith(HEADER_TOKEN):
        return lines[1:]
    return lines


def _row_problem(name: str, salary: Any) -> str | None:
    if not name:
        return "missing name"
    if salary is None:
        return "missing salary"
    if isinstance(salary, float) and math.isnan(salary):
        return "salary is not a number"
    return None


def parse_golfer_csv(text: str, *, strict: bool = False) -> list[dict[str, Any]]:
    records: list[dict[str, Any]] = []
    problems: list[tuple[int, str]] = []
    for number, line in _data_lines(text):
        fields = [part.strip() for part in line.split(",")]
        name = fields[0]
        salary = parse_number(fields[1]) if len(fields) > 1 else None
        if strict:
            problem = _row_problem(name, salary)
            if problem:
                problems.append((number, problem))
                continue
        records.append({"name": name, "salary": salary})
    if problems:
        raise CsvParseError(problems)
    return records


def decode_upload(content: bytes) -> str:
    return content.decode("utf-8-sig", errors="replace")

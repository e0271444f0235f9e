"""
Sequence : 01
Module: je_text_parser.py
Description: Reads journal entries from the flat key/value text file.
             Several entries per file are separated by "=== JE ===" lines,
             line items inside an entry are separated by blank lines.
Production : Ready
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable

from b1_migration.config.settings import JE_SEPARATOR
from b1_migration.models.journal_entry import JournalEntry, LineItem

_KEY_RE = re.compile(r"^(date|memo|accountcode|debit|credit|linememo)\s*=", re.IGNORECASE)
_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")


class JournalEntryParseError(ValueError):
    """Raised when a Date or amount value in the input text cannot be parsed."""

    def __init__(self, message: str, line_no: int, line: str):
        super().__init__(f"{message} (line {line_no}: '{line}')")
        self.line_no = line_no
        self.line = line


# --------------------------- Builders ---------------------------
@dataclass
class _LineBuilder:
    account_code: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    line_memo: str | None = None

    def build(self) -> LineItem:
        return LineItem(self.account_code, self.debit, self.credit, self.line_memo)


@dataclass
class _EntryBuilder:
    reference_date: str | None = None
    memo: str | None = None
    lines: list = field(default_factory=list)
    open_line: _LineBuilder | None = None

    def close_line(self):
        if self.open_line is not None:
            self.lines.append(self.open_line.build())
            self.open_line = None

    def build(self) -> JournalEntry | None:
        self.close_line()
        if not self.lines:
            return None
        return JournalEntry(self.reference_date, self.memo, tuple(self.lines))


# --------------------------- Value parsing ---------------------------
def _parse_date(value: str, line_no: int, line: str) -> str:
    """MM/DD/YYYY -> YYYY-MM-DD"""
    if not _DATE_RE.match(value):
        raise JournalEntryParseError(f"Invalid date '{value}', expected MM/DD/YYYY", line_no, line)
    try:
        return datetime.strptime(value, "%m/%d/%Y").strftime("%Y-%m-%d")
    except ValueError:
        raise JournalEntryParseError(f"Invalid date '{value}', expected MM/DD/YYYY", line_no, line) from None


def _parse_amount(value: str, line_no: int, line: str) -> Decimal:
    try:
        amount = Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise JournalEntryParseError(f"Invalid amount '{value}'", line_no, line) from None
    if not amount.is_finite() or amount < 0:
        raise JournalEntryParseError(f"Invalid amount '{value}'", line_no, line)
    return amount


# --------------------------- Parser ---------------------------
def parse_journal_entries(lines: Iterable[str]) -> list[JournalEntry]:
    """
    Converts text lines into journal entries.

    - "=== JE ===" closes the current entry (kept only if it has at least one line item)
    - a blank line closes the current line item
    - "AccountCode =" closes the open line item and opens a new one
    - Debit / Credit / LineMemo apply to the open line item, ignored if none is open
    - any data-bearing line opens a new entry when none is open
    - at end of input the open line item and entry are flushed

    Raises JournalEntryParseError on a malformed date or amount; nothing partial is returned.
    """
    entries: list[JournalEntry] = []
    current: _EntryBuilder | None = None

    def _flush():
        if current is not None:
            je = current.build()
            if je is not None:
                entries.append(je)

    for line_no, raw in enumerate(lines, start=1):
        line = raw.strip()

        if line == JE_SEPARATOR:
            _flush()
            current = None
            continue

        if not line:
            if current is not None:
                current.close_line()
            continue

        if current is None:
            current = _EntryBuilder()

        m = _KEY_RE.match(line)
        if not m:
            continue
        key = m.group(1).lower()
        value = line.partition("=")[2].strip()

        if key == "date":
            current.reference_date = _parse_date(value, line_no, line)
        elif key == "memo":
            current.memo = value
        elif key == "accountcode":
            current.close_line()
            current.open_line = _LineBuilder(account_code=value)
        elif current.open_line is None:
            continue
        elif key == "debit":
            current.open_line.debit = _parse_amount(value, line_no, line)
        elif key == "credit":
            current.open_line.credit = _parse_amount(value, line_no, line)
        elif key == "linememo":
            current.open_line.line_memo = value

    _flush()
    return entries


def read_journal_entry_file(file_path: str) -> list[JournalEntry]:
    """Reads a UTF-8 (BOM tolerated) journal entry file and parses every entry in it."""
    with open(file_path, "r", encoding="utf-8-sig") as f:
        return parse_journal_entries(f.read().splitlines())

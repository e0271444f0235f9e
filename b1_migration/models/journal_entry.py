"""Journal entry and line item records posted to the Service Layer."""

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class LineItem:
    """A single debit or credit line of a journal entry."""

    account_code: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    line_memo: str | None = None

    def to_payload(self) -> dict:
        return {
            "AccountCode": self.account_code,
            "Debit": self.debit,
            "Credit": self.credit,
            "LineMemo": self.line_memo,
        }


@dataclass(frozen=True)
class JournalEntry:
    """A dated, memoed group of line items. Line order is the posting order."""

    reference_date: str | None = None
    memo: str | None = None
    lines: tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def total_debit(self) -> Decimal:
        return sum((ln.debit for ln in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((ln.credit for ln in self.lines), Decimal("0"))

    def to_payload(self) -> dict:
        """Service Layer JournalEntries body (None fields are dropped on serialization)."""
        return {
            "ReferenceDate": self.reference_date,
            "Memo": self.memo,
            "JournalEntryLines": [ln.to_payload() for ln in self.lines],
        }

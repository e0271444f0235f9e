"""Result of one atomic batch submission."""

from dataclasses import dataclass, field
from typing import NamedTuple


class BatchFailure(NamedTuple):
    """Failure attributed to the entry at `index` (zero-based submission order)."""

    index: int
    memo: str
    error: str

    @classmethod
    def on_first_entry(cls, entries, error: str) -> "BatchFailure":
        """Batch-level failure reported against entry 0."""
        memo = (entries[0].memo or "") if entries else ""
        return cls(0, memo, error)


@dataclass
class BatchOutcome:
    succeeded: bool
    failures: list[BatchFailure] = field(default_factory=list)
    status_code: int = 0

    @classmethod
    def all_succeeded(cls, status_code: int) -> "BatchOutcome":
        return cls(succeeded=True, failures=[], status_code=status_code)

    @classmethod
    def failed(cls, failures: list[BatchFailure], status_code: int = 0) -> "BatchOutcome":
        return cls(succeeded=False, failures=list(failures), status_code=status_code)

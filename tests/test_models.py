from decimal import Decimal

import orjson
import pytest

from b1_migration.models.batch_outcome import BatchFailure, BatchOutcome
from b1_migration.models.journal_entry import JournalEntry, LineItem
from b1_migration.utils.payload_cleaner import deep_clean, dumps_payload, is_filled


def test_totals():
    je = JournalEntry("2024-01-15", "Split", (
        LineItem("5000", debit=Decimal("60.10")),
        LineItem("5100", debit=Decimal("39.90")),
        LineItem("1000", credit=Decimal("100.00")),
    ))
    assert je.total_debit == Decimal("100.00")
    assert je.total_credit == Decimal("100.00")


def test_entries_are_immutable():
    je = JournalEntry(memo="x")
    with pytest.raises(AttributeError):
        je.memo = "y"


def test_payload_drops_missing_fields():
    je = JournalEntry(None, None, (LineItem("1000", debit=Decimal("5")),))
    body = orjson.loads(dumps_payload(je.to_payload()))
    assert body == {"JournalEntryLines": [{"AccountCode": "1000", "Debit": 5, "Credit": 0}]}


def test_dumps_payload_keeps_decimal_text():
    payload = {"Debit": Decimal("0.10"), "Credit": Decimal("99999999999999999.99")}
    assert dumps_payload(payload) == b'{"Debit":0.10,"Credit":99999999999999999.99}'


def test_dumps_payload_rejects_non_finite_decimal():
    with pytest.raises(TypeError):
        dumps_payload({"Debit": Decimal("NaN")})


@pytest.mark.parametrize("value, expected", [
    (None, False),
    ("", False),
    ("   ", False),
    (0, True),
    (Decimal("0"), True),
    ("x", True),
])
def test_is_filled(value, expected):
    assert is_filled(value) is expected


def test_deep_clean_nested():
    assert deep_clean({"a": {"b": None}, "c": [{}, {"d": ""}, 1], "e": "keep"}) == {"c": [1], "e": "keep"}


def test_outcome_constructors():
    ok = BatchOutcome.all_succeeded(202)
    assert ok.succeeded and ok.failures == [] and ok.status_code == 202

    failures = (BatchFailure(0, "Rent", "bad"),)
    failed = BatchOutcome.failed(failures, status_code=400)
    assert failed.succeeded is False
    assert failed.failures == [BatchFailure(0, "Rent", "bad")]


def test_failure_on_first_entry():
    entries = [JournalEntry(memo="Rent"), JournalEntry(memo="Utilities")]
    assert BatchFailure.on_first_entry(entries, "boom") == (0, "Rent", "boom")
    assert BatchFailure.on_first_entry([JournalEntry()], "boom") == (0, "", "boom")
    assert BatchFailure.on_first_entry([], "boom") == (0, "", "boom")

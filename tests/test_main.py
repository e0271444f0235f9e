from unittest.mock import patch

import pytest

from b1_migration.main import create_parser, main
from b1_migration.models.batch_outcome import BatchFailure, BatchOutcome

INITIATOR = "b1_migration.main"

RENT = """\
Date = 01/15/2024
Memo = Rent
AccountCode = 5000
Debit = 100.00
AccountCode = 1000
Credit = 90.00
"""


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("JE_FILE_PATH", raising=False)


@pytest.fixture
def je_file(tmp_path):
    path = tmp_path / "je.txt"
    path.write_text(RENT, encoding="utf-8")
    return str(path)


def test_parser_post_flags():
    args = create_parser().parse_args(["post", "--file", "x.txt", "--no-email"])
    assert args.command == "post"
    assert args.file == "x.txt"
    assert args.no_email is True
    assert args.single is False


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        create_parser().parse_args([])


def test_validate_prints_entries(je_file, capsys):
    assert main(["validate", "--file", je_file]) == 0
    out = capsys.readouterr().out
    assert "Rent" in out
    assert "2024-01-15" in out
    assert "NO" in out


def test_validate_without_file(capsys):
    assert main(["validate"]) == 1


def test_validate_parse_error_returns_1(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("Date = 2024-01-15\n", encoding="utf-8")
    assert main(["validate", "--file", str(path)]) == 1


def test_validate_missing_file_returns_1(tmp_path):
    assert main(["validate", "--file", str(tmp_path / "nope.txt")]) == 1


@patch(f"{INITIATOR}.initiating_journalentry_batch")
def test_post_success(mock_batch, je_file):
    mock_batch.return_value = BatchOutcome.all_succeeded(202)
    assert main(["post", "--file", je_file, "--no-email"]) == 0
    mock_batch.assert_called_once_with(je_file, notify=False)


@patch(f"{INITIATOR}.initiating_journalentry_batch")
def test_post_failure_prints_table(mock_batch, je_file, capsys):
    mock_batch.return_value = BatchOutcome.failed([BatchFailure(0, "Rent", "Account missing")], 400)
    assert main(["post", "--file", je_file]) == 1
    mock_batch.assert_called_once_with(je_file, notify=None)
    assert "Account missing" in capsys.readouterr().out


@patch(f"{INITIATOR}.initiating_journalentry_batch", return_value=None)
def test_post_nothing_parsed(mock_batch, je_file):
    assert main(["post", "--file", je_file]) == 1


@patch(f"{INITIATOR}.initiating_journalentry_single", return_value=True)
def test_post_single(mock_single, je_file):
    assert main(["post", "--single", "--file", je_file]) == 0
    mock_single.assert_called_once_with(je_file)


@patch(f"{INITIATOR}.initiating_sample_batch")
def test_sample(mock_sample):
    mock_sample.return_value = BatchOutcome.all_succeeded(202)
    assert main(["sample", "--debit-account", "1", "--credit-account", "2"]) == 0
    mock_sample.assert_called_once_with("1", "2")

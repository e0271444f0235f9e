from datetime import date
from decimal import Decimal

from b1_migration.auth.session_manager import service_layer_session
from b1_migration.config.settings import get_email_context, get_je_file_path
from b1_migration.extraction.je_text_parser import read_journal_entry_file
from b1_migration.migration.D01_journalentry_batch_poster import post_all_or_nothing
from b1_migration.migration.D02_journalentry_single_poster import post_single_journalentry
from b1_migration.models.batch_outcome import BatchFailure, BatchOutcome
from b1_migration.models.journal_entry import JournalEntry, LineItem
from b1_migration.utils.email_notifier import build_summary_message, send_email
from b1_migration.utils.logger_builder import global_logger as logger


def log_batch_outcome(outcome: BatchOutcome, total: int) -> None:
    if outcome.succeeded:
        logger.info(f"✅ Created {total} JEs successfully.")
        return
    logger.error("❌ Batch errors:")
    for f in outcome.failures:
        logger.error(f"  JE #{f.index + 1} (Memo='{f.memo}'): {f.error}")
    logger.error("❌ Batch failed: no JEs were created.")


def notify_batch_outcome(outcome: BatchOutcome, total: int, send: bool | None = None) -> None:
    """One summary email for the whole batch, unless EMAIL_SEND=N (or send=False)."""
    ctx = get_email_context()
    if send is None:
        send = ctx["ENABLED"]
    if not send:
        logger.info("ℹ️ EmailSend = N: skipping batch summary email.")
        return
    try:
        send_email(ctx["SUBJECT"], build_summary_message(outcome, total))
    except OSError as e:
        logger.error(f"❌ Batch summary email failed: {e}")


def _login_failure(entries) -> BatchOutcome:
    return BatchOutcome.failed([BatchFailure.on_first_entry(entries, "Service Layer login failed")], status_code=0)


def initiating_journalentry_batch(file_path: str | None = None, notify: bool | None = None, http=None) -> BatchOutcome | None:
    """
    Reads every JE from the text file and posts them all-or-nothing through one $batch changeset.
    Returns None when the file holds no entries; parse and batch-size errors propagate.
    """
    file_path = file_path or get_je_file_path()
    if not file_path:
        raise ValueError("No journal entry file given (set JE_FILE_PATH or pass --file).")

    logger.info(f"🔎 Reading journal entries from {file_path}")
    entries = read_journal_entry_file(file_path)
    if not entries:
        logger.error("❌ No journal entry lines were parsed from the file.")
        return None
    logger.info(f"📄 Parsed {len(entries)} Journal Entries from file.")

    with service_layer_session(http=http) as session_id:
        if not session_id:
            outcome = _login_failure(entries)
        else:
            outcome = post_all_or_nothing(session_id, entries, http=http)

    log_batch_outcome(outcome, len(entries))
    notify_batch_outcome(outcome, len(entries), send=notify)
    return outcome


def initiating_journalentry_single(file_path: str | None = None, http=None) -> bool:
    """
    Posts the single JE held in the text file through the plain JournalEntries endpoint.
    """
    file_path = file_path or get_je_file_path()
    if not file_path:
        raise ValueError("No journal entry file given (set JE_FILE_PATH or pass --file).")

    entries = read_journal_entry_file(file_path)
    if not entries:
        logger.error("❌ No journal entry lines were parsed from the file.")
        return False
    if len(entries) > 1:
        logger.error(f"❌ Single mode expects one JE, file holds {len(entries)}. Use batch mode.")
        return False

    with service_layer_session(http=http) as session_id:
        if not session_id:
            return False
        ok = post_single_journalentry(session_id, entries[0], http=http)

    if ok:
        logger.info("✅ Journal Entry from file inserted successfully.")
    else:
        logger.error("❌ Journal Entry was not inserted due to posting error.")
    return ok


def build_sample_entries(debit_account: str = "160000", credit_account: str = "161000") -> list[JournalEntry]:
    """Two balanced sample JEs (1.00 and 2.00) dated today."""
    today = date.today().isoformat()
    return [
        JournalEntry(today, "Sample batch JE", (
            LineItem(debit_account, debit=Decimal(amount), line_memo=f"Test Debit {n}"),
            LineItem(credit_account, credit=Decimal(amount), line_memo=f"Test Credit {n}"),
        ))
        for n, amount in ((1, "1.00"), (2, "2.00"))
    ]


def initiating_sample_batch(debit_account: str = "160000", credit_account: str = "161000", http=None) -> BatchOutcome:
    """
    Creates two sample JEs atomically; if one fails, none are created.
    Used as a connectivity check against a Service Layer company.
    """
    entries = build_sample_entries(debit_account, credit_account)
    with service_layer_session(http=http) as session_id:
        if not session_id:
            outcome = _login_failure(entries)
        else:
            outcome = post_all_or_nothing(session_id, entries, http=http)
    log_batch_outcome(outcome, len(entries))
    return outcome

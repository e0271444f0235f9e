# Entry point for the journal entry batch run

import argparse
import sys

from tabulate import tabulate

from b1_migration.config.settings import get_je_file_path
from b1_migration.extraction.je_text_parser import JournalEntryParseError, read_journal_entry_file
from b1_migration.porter_initiator.x_01_journalentry_file_initiator import (
    initiating_journalentry_batch,
    initiating_journalentry_single,
    initiating_sample_batch,
)
from b1_migration.utils.batch_request_encoder import BatchSizeError
from b1_migration.utils.logger_builder import build_logger, global_logger as logger


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="b1-je-batch",
        description="Post journal entries from a text file to SAP Business One Service Layer",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    post_parser = subparsers.add_parser("post", help="Post all JEs in the file as one atomic batch")
    post_parser.add_argument("--file", help="Journal entry text file (default: JE_FILE_PATH env var)")
    post_parser.add_argument("--single", action="store_true", help="Post a one-JE file without $batch")
    post_parser.add_argument("--no-email", action="store_true", help="Skip the summary email")

    sample_parser = subparsers.add_parser("sample", help="Post two sample JEs as a connectivity check")
    sample_parser.add_argument("--debit-account", default="160000")
    sample_parser.add_argument("--credit-account", default="161000")

    validate_parser = subparsers.add_parser("validate", help="Parse the file and print its JEs, nothing is posted")
    validate_parser.add_argument("--file", help="Journal entry text file (default: JE_FILE_PATH env var)")

    return parser


def print_failures(outcome) -> None:
    rows = [[f.index + 1, f.memo, f.error] for f in outcome.failures]
    print(tabulate(rows, headers=["JE #", "Memo", "Error"], tablefmt="pretty"))


def cmd_validate(args) -> int:
    file_path = args.file or get_je_file_path()
    if not file_path:
        print("Error: no journal entry file given (set JE_FILE_PATH or pass --file).", file=sys.stderr)
        return 1
    entries = read_journal_entry_file(file_path)
    if not entries:
        print("No journal entries found.")
        return 1

    rows = [
        [n, je.reference_date, je.memo, len(je.lines), je.total_debit, je.total_credit,
         "yes" if je.total_debit == je.total_credit else "NO"]
        for n, je in enumerate(entries, start=1)
    ]
    print(tabulate(rows, headers=["JE #", "Date", "Memo", "Lines", "Debit", "Credit", "Balanced"], tablefmt="pretty"))
    return 0


def cmd_post(args) -> int:
    if args.single:
        return 0 if initiating_journalentry_single(args.file) else 1

    outcome = initiating_journalentry_batch(args.file, notify=False if args.no_email else None)
    if outcome is None:
        return 1
    if not outcome.succeeded:
        print_failures(outcome)
        return 1
    return 0


def cmd_sample(args) -> int:
    outcome = initiating_sample_batch(args.debit_account, args.credit_account)
    if not outcome.succeeded:
        print_failures(outcome)
        return 1
    return 0


COMMANDS = {
    "post": cmd_post,
    "sample": cmd_sample,
    "validate": cmd_validate,
}


def main(argv=None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    build_logger("je_batch")

    try:
        return COMMANDS[args.command](args)
    except (JournalEntryParseError, BatchSizeError) as e:
        logger.error(f"❌ {e}")
        return 1
    except (OSError, ValueError) as e:
        logger.error(f"❌ Failed to read and insert JEs from file: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

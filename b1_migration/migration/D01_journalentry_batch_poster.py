"""
Sequence : 01
Module: D01_journalentry_batch_poster.py
Description: Posts up to 10 JournalEntries to SAP Business One Service Layer in a
             single $batch changeset. All entries are created or none are.
             Failures are mapped back to the entry (index + Memo) that caused them.
Production : Ready
"""

import requests

from b1_migration.config.settings import get_service_layer_context
from b1_migration.models.batch_outcome import BatchFailure, BatchOutcome
from b1_migration.utils.batch_request_encoder import (
    build_changeset_body,
    derive_batch_url,
    derive_entity_path,
    validate_batch_size,
)
from b1_migration.utils.batch_response_decoder import analyze_batch_response, extract_batch_errors
from b1_migration.utils.http_session import session as default_session
from b1_migration.utils.logger_builder import global_logger as logger


def _failures_from_error_body(body_text: str, entries) -> list[BatchFailure]:
    """Structured errors from the body first, otherwise the raw body attributed to entry 0."""
    failures = extract_batch_errors(body_text, entries)
    if not failures:
        # No error object at all, attach raw
        failures = [BatchFailure.on_first_entry(entries, body_text.strip())]
    return failures


def post_all_or_nothing(session_id: str, entries, http=None, base_url: str = None, timeout: float = None) -> BatchOutcome:
    """
    Posts all JEs in a single $batch changeset (atomic).
    Returns BatchOutcome.succeeded=True only if ALL were created; otherwise the
    failures carry (index, memo, error). Does NOT fetch created JE details.

    Raises BatchSizeError (no network call) for an empty batch or more than 10 entries.
    """
    try:
        validate_batch_size(entries)
    except ValueError as e:
        logger.error(f"❌ {e}")
        raise

    ctx = get_service_layer_context()
    base_url = (base_url or ctx["BASE_URL"]).rstrip("/")
    timeout = timeout or ctx["BATCH_TIMEOUT"]
    http = http or default_session

    request = build_changeset_body(entries, entity_path=derive_entity_path(base_url))
    headers = {
        "Accept": "application/json",
        "Cookie": f"B1SESSION={session_id}",
        "Content-Type": request.content_type,
    }

    logger.info(f"📤 Posting {len(entries)} JournalEntry(s) via Service Layer $batch (one changeset)...")

    try:
        resp = http.post(
            derive_batch_url(base_url),
            data=request.body,
            headers=headers,
            timeout=timeout,
            verify=ctx["VERIFY_SSL"],
        )
        resp.raise_for_status()
    except requests.HTTPError as e:
        # Service Layer answers 4xx with the error JSON in the body; prefer it over the status
        status = e.response.status_code if e.response is not None else 0
        body_text = (e.response.text if e.response is not None else "") or ""
        failures = _failures_from_error_body(body_text, entries)
        logger.error(f"❌ Batch POST failed (HTTP {status}, {len(entries)} items)")
        return BatchOutcome.failed(failures, status_code=status)
    except requests.RequestException as e:
        logger.exception(f"❌ Exception during batch POST ({len(entries)} items)")
        return BatchOutcome.failed([BatchFailure.on_first_entry(entries, str(e))], status_code=0)

    if not 200 <= resp.status_code < 300:
        failures = _failures_from_error_body(resp.text or "", entries)
        logger.error(f"❌ Batch POST not accepted (HTTP {resp.status_code}, {len(entries)} items)")
        return BatchOutcome.failed(failures, status_code=resp.status_code)

    all_created, failures = analyze_batch_response(resp.text or "", entries)
    if all_created:
        logger.info(f"✅ Batch accepted (HTTP {resp.status_code}): {len(entries)} JournalEntry(s) created")
        return BatchOutcome.all_succeeded(resp.status_code)

    logger.error(f"❌ Batch rejected (HTTP {resp.status_code}): {len(failures)} error(s) reported")
    return BatchOutcome.failed(failures, status_code=resp.status_code)

"""
Sequence : 02
Module: D02_journalentry_single_poster.py
Description: Posts one JournalEntry to SAP Business One Service Layer (no batching).
Production : Ready
"""

import requests

from b1_migration.config.settings import JE_ENTITY, get_service_layer_context
from b1_migration.utils.http_session import session as default_session
from b1_migration.utils.logger_builder import global_logger as logger
from b1_migration.utils.payload_cleaner import dumps_payload


def post_single_journalentry(session_id: str, entry, http=None, base_url: str = None, timeout: float = None) -> bool:
    """
    POST <base>/JournalEntries with a single entry.
    Returns True on 201 Created, False otherwise (the Service Layer error body is logged).
    """
    ctx = get_service_layer_context()
    base_url = (base_url or ctx["BASE_URL"]).rstrip("/")
    http = http or default_session

    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Cookie": f"B1SESSION={session_id}",
    }

    try:
        resp = http.post(
            f"{base_url}/{JE_ENTITY}",
            data=dumps_payload(entry.to_payload()),
            headers=headers,
            timeout=timeout or ctx["BATCH_TIMEOUT"],
            verify=ctx["VERIFY_SSL"],
        )
    except requests.RequestException as e:
        logger.error(f"❌ Unexpected error posting Journal Entry (Memo='{entry.memo or ''}'): {e}")
        return False

    if resp.status_code == 201:
        logger.info(f"✅ Journal Entry created (Memo='{entry.memo or ''}')")
        return True

    reason = (resp.text or f"HTTP {resp.status_code}")[:1000]
    logger.error(f"❌ Journal Entry creation failed (Status {resp.status_code}): {reason}")
    return False

from contextlib import contextmanager

import requests

from b1_migration.config.settings import get_service_layer_context
from b1_migration.utils.http_session import session as default_session
from b1_migration.utils.logger_builder import global_logger as logger


def login(http=None) -> str | None:
    """
    Opens a Service Layer session with the credentials from the environment.
    Returns the SessionId (used as the B1SESSION cookie) or None on failure.
    """
    ctx = get_service_layer_context()
    http = http or default_session

    missing = [k for k in ("BASE_URL", "USERNAME", "PASSWORD", "COMPANY_DB") if not ctx.get(k)]
    if missing:
        logger.error(f"❌ Login skipped: missing Service Layer settings {', '.join(missing)}")
        return None

    body = {
        "UserName": ctx["USERNAME"],
        "Password": ctx["PASSWORD"],
        "CompanyDB": ctx["COMPANY_DB"],
    }

    try:
        resp = http.post(f"{ctx['BASE_URL']}/Login", json=body, timeout=60, verify=ctx["VERIFY_SSL"])
        resp.raise_for_status()
        session_id = resp.json().get("SessionId")
    except (requests.RequestException, ValueError) as e:
        logger.error(f"❌ Login failed: {e}")
        return None

    if not session_id:
        logger.error("❌ Login failed: no SessionId in response.")
        return None

    logger.info("✅ Logged in successfully.")
    return session_id


def logout(session_id: str, http=None) -> bool:
    """Closes the Service Layer session. 200 and 204 both count as success."""
    ctx = get_service_layer_context()
    http = http or default_session

    try:
        resp = http.post(
            f"{ctx['BASE_URL']}/Logout",
            headers={"Accept": "application/json", "Cookie": f"B1SESSION={session_id}"},
            timeout=60,
            verify=ctx["VERIFY_SSL"],
        )
    except requests.RequestException as e:
        logger.error(f"❌ An error occurred during logout: {e}")
        return False

    if resp.status_code in (200, 204):
        logger.info("✅ Logged out successfully.")
        return True

    logger.error(f"❌ Logout failed. Status code: {resp.status_code}")
    return False


@contextmanager
def service_layer_session(http=None):
    """
    Yields a SessionId (None if login failed) and always logs out afterwards.
    """
    session_id = login(http=http)
    try:
        yield session_id
    finally:
        if session_id:
            logout(session_id, http=http)

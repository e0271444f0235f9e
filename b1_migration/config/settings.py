# config/settings.py

import os
from dotenv import load_dotenv

load_dotenv()

# Service Layer accepts at most this many operations in one atomic changeset
MAX_BATCH_ENTRIES = 10
DEFAULT_BATCH_TIMEOUT = 60
JE_SEPARATOR = "=== JE ==="
JE_ENTITY = "JournalEntries"


def _env_flag(name: str, default: str) -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("y", "yes", "true", "1", "on")


def get_service_layer_context() -> dict:
    """
    Returns the Service Layer connection settings read from the environment.

    Keys: BASE_URL, USERNAME, PASSWORD, COMPANY_DB, VERIFY_SSL, BATCH_TIMEOUT
    """
    return {
        "BASE_URL": (os.getenv("SL_BASE_URL") or "").rstrip("/"),
        "USERNAME": os.getenv("SL_USERNAME"),
        "PASSWORD": os.getenv("SL_PASSWORD"),
        "COMPANY_DB": os.getenv("SL_COMPANY_DB"),
        "VERIFY_SSL": _env_flag("SL_VERIFY_SSL", "true"),
        "BATCH_TIMEOUT": int(os.getenv("SL_BATCH_TIMEOUT", str(DEFAULT_BATCH_TIMEOUT))),
    }


def get_email_context() -> dict:
    """
    SMTP settings for the batch summary mail.
    SMTP_TO may hold several addresses separated by ',' or ';'.
    """
    user = os.getenv("SMTP_USER")
    raw_to = (os.getenv("SMTP_TO") or "").replace(";", ",")
    return {
        "ENABLED": _env_flag("EMAIL_SEND", "Y"),
        "HOST": os.getenv("SMTP_HOST", "smtp.gmail.com"),
        "PORT": int(os.getenv("SMTP_PORT", "587")),
        "USER": user,
        "PASSWORD": os.getenv("SMTP_APP_PASSWORD"),
        "FROM": os.getenv("SMTP_FROM") or user,
        "FROM_NAME": os.getenv("SMTP_FROM_NAME"),
        "TO": [addr.strip() for addr in raw_to.split(",") if addr.strip()],
        "SUBJECT": os.getenv("SMTP_SUBJECT") or "Journal Entry Notification",
    }


def get_je_file_path() -> str | None:
    return os.getenv("JE_FILE_PATH")

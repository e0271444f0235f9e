# utils/payload_cleaner.py
from decimal import Decimal
from typing import Any

import orjson

__all__ = ["is_filled", "deep_clean", "dumps_payload"]


def is_filled(value: Any) -> bool:
    """
    Check whether a value is meaningfully filled (not None / empty string).
    Zero amounts count as filled: Service Layer expects both Debit and Credit on every line.
    """
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    return True


def deep_clean(obj: Any) -> Any:
    """
    Recursively remove None, empty strings, and empty dicts/lists from a structure.
    Used to sanitize JournalEntry payloads before they are serialized.

    Args:
        obj: A dict, list, or primitive value.

    Returns:
        Cleaned version of the same type, with empty/null fields stripped.
    """
    if isinstance(obj, dict):
        cleaned = {k: deep_clean(v) for k, v in obj.items()}
        return {
            k: v for k, v in cleaned.items()
            if is_filled(v) and not (isinstance(v, (dict, list)) and len(v) == 0)
        }

    elif isinstance(obj, list):
        cleaned_list = [deep_clean(v) for v in obj]
        return [
            v for v in cleaned_list
            if is_filled(v) and not (isinstance(v, (dict, list)) and len(v) == 0)
        ]

    else:
        return obj


def _default(obj):
    # orjson has no native Decimal support; write the amount text as read, not a float
    if isinstance(obj, Decimal) and obj.is_finite():
        return orjson.Fragment(str(obj).encode())
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def dumps_payload(payload: dict) -> bytes:
    """Serialize a cleaned payload to compact JSON bytes."""
    return orjson.dumps(deep_clean(payload), default=_default)

# utils/batch_response_decoder.py
"""
Tolerant reader for Service Layer $batch responses.

The response framing differs between failure paths (well-formed multipart,
truncated parts, a bare JSON error from a proxy), so no multipart parser is
used: the body is scanned for top-level JSON objects and every
error.message.value found is mapped to the submitted entries by order.
"""

from typing import Any, Iterator

import orjson

from b1_migration.models.batch_outcome import BatchFailure

ERROR_MESSAGE_PATH = "error.message.value"
EMPTY_RESPONSE_MESSAGE = "Empty batch response"
NO_DETAIL_MESSAGE = "Batch reported an error but no details were available"


def has_error_indicator(resp_text: str) -> bool:
    return '"error"' in (resp_text or "").lower()


def _find_object_end(text: str, start: int) -> int:
    """
    Index of the brace closing the object opened at `start`, or -1 if it never closes.
    Braces inside JSON string literals are not counted.
    """
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        c = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif c == "\\":
                escaped = True
            elif c == '"':
                in_string = False
            continue
        if c == '"':
            in_string = True
        elif c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def iter_json_objects(text: str) -> Iterator[dict]:
    """
    Yields each top-level {...} block of `text` that parses as JSON, left to right.
    Blocks that are not valid JSON (stray braces in HTTP framing) are skipped;
    an unterminated '{' is stepped over and scanning continues after it.
    """
    pos = 0
    while True:
        start = text.find("{", pos)
        if start < 0:
            return
        end = _find_object_end(text, start)
        if end < 0:
            pos = start + 1
            continue
        pos = end + 1
        try:
            obj = orjson.loads(text[start:end + 1])
        except orjson.JSONDecodeError:
            continue
        yield obj


def select_path(obj: Any, dotted_path: str) -> Any:
    """Walk a dotted path ("error.message.value") through nested dicts; None when absent."""
    node = obj
    for key in dotted_path.split("."):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def extract_error_messages(resp_text: str) -> list[str]:
    messages = []
    for obj in iter_json_objects(resp_text or ""):
        value = select_path(obj, ERROR_MESSAGE_PATH)
        if value is None or isinstance(value, (dict, list)):
            continue
        msg = str(value)
        if msg.strip():
            messages.append(msg)
    return messages


def extract_batch_errors(resp_text: str, entries) -> list[BatchFailure]:
    """
    Maps captured error messages to the entries by order: message i belongs to entry i.
    Extra messages or extra entries stay unpaired.
    """
    if not resp_text or not resp_text.strip():
        return [BatchFailure.on_first_entry(entries, EMPTY_RESPONSE_MESSAGE)]

    messages = extract_error_messages(resp_text)
    failures = [
        BatchFailure(i, entries[i].memo or "", msg)
        for i, msg in enumerate(messages[: len(entries)])
    ]

    if not failures and has_error_indicator(resp_text):
        failures.append(BatchFailure.on_first_entry(entries, NO_DETAIL_MESSAGE))
    return failures


def analyze_batch_response(resp_text: str, entries) -> tuple[bool, list[BatchFailure]]:
    """
    Returns (all_created, failures).
    No "error" anywhere in a non-empty body means the whole changeset was created.
    """
    if not resp_text or not resp_text.strip():
        return False, [BatchFailure.on_first_entry(entries, EMPTY_RESPONSE_MESSAGE)]

    if not has_error_indicator(resp_text):
        return True, []

    return False, extract_batch_errors(resp_text, entries)

# utils/batch_request_encoder.py

import uuid
from dataclasses import dataclass
from urllib.parse import urlsplit

from b1_migration.config.settings import JE_ENTITY, MAX_BATCH_ENTRIES
from b1_migration.utils.payload_cleaner import dumps_payload

CRLF = b"\r\n"


class BatchSizeError(ValueError):
    """Raised before any network call when a batch is empty or above the changeset limit."""


@dataclass(frozen=True)
class BatchRequest:
    body: bytes
    batch_boundary: str
    changeset_boundary: str

    @property
    def content_type(self) -> str:
        return f"multipart/mixed; boundary={self.batch_boundary}"


def validate_batch_size(entries) -> None:
    if not entries:
        raise BatchSizeError("No JEs to post.")
    if len(entries) > MAX_BATCH_ENTRIES:
        raise BatchSizeError(
            f"Too many JEs for one transaction ({len(entries)} > {MAX_BATCH_ENTRIES})."
        )


def derive_batch_url(base_url: str) -> str:
    """
    Convert the Service Layer root to its $batch endpoint.
    Example:
      https://host:50000/b1s/v1/  -> https://host:50000/b1s/v1/$batch
    """
    return f"{base_url.rstrip('/')}/$batch"


def derive_entity_path(base_url: str, entity_name: str = JE_ENTITY) -> str:
    """
    Path used in the request line of each changeset member.
    Example:
      https://host:50000/b1s/v1, "JournalEntries" -> /b1s/v1/JournalEntries
    """
    path = urlsplit(base_url or "").path.rstrip("/")
    return f"{path}/{entity_name}"


def build_changeset_body(entries, entity_path: str = f"/{JE_ENTITY}") -> BatchRequest:
    """
    Builds a multipart/mixed $batch body holding exactly one changeset.
    Every entry becomes one POST inside the changeset (Content-ID 1..n), so the
    Service Layer creates all of them or none.
    """
    validate_batch_size(entries)

    batch_boundary = f"batch_{uuid.uuid4().hex}"
    changeset_boundary = f"changeset_{uuid.uuid4().hex}"

    parts = [
        f"--{batch_boundary}".encode(),
        f"Content-Type: multipart/mixed; boundary={changeset_boundary}".encode(),
        b"",
    ]

    for cid, je in enumerate(entries, start=1):
        parts += [
            f"--{changeset_boundary}".encode(),
            b"Content-Type: application/http",
            b"Content-Transfer-Encoding: binary",
            f"Content-ID: {cid}".encode(),
            b"",
            f"POST {entity_path} HTTP/1.1".encode(),
            b"Content-Type: application/json",
            b"",
            dumps_payload(je.to_payload()),
            b"",
        ]

    parts += [
        f"--{changeset_boundary}--".encode(),
        f"--{batch_boundary}--".encode(),
        b"",
    ]

    return BatchRequest(
        body=CRLF.join(parts),
        batch_boundary=batch_boundary,
        changeset_boundary=changeset_boundary,
    )

"""Encode uploaded identity documents as embeddable data references."""

import base64

from havenly.domain.errors import ValidationError

ALLOWED_PREFIXES = ("image/",)
ALLOWED_TYPES = {"application/pdf"}
MAX_DOCUMENT_BYTES = 10 * 1024 * 1024


def encode_document(content: bytes, content_type: str | None) -> str:
    """Return a ``data:`` URL for an image or PDF payload.

    Raises:
        ValidationError: Empty or oversized payload, or unsupported type.
    """
    if not content:
        raise ValidationError("An identity document is required")
    if len(content) > MAX_DOCUMENT_BYTES:
        raise ValidationError("Document exceeds the 10 MB limit")

    mime = (content_type or "").split(";", 1)[0].strip().lower()
    if not (mime in ALLOWED_TYPES or mime.startswith(ALLOWED_PREFIXES)):
        raise ValidationError("Document must be an image or a PDF")

    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{encoded}"

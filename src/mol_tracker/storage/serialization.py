"""Character document encoding.

Documents are stored as pretty-printed JSON using the camelCase keys of the
original character files (``currentHealth``, skill ``parent``), plus a
``version`` stamp and an optional envelope timestamp (``lastSaved`` for the
auto-save record, ``exportedAt`` for exported files).

``deserialize`` performs the minimal structural validation the core needs:
a payload must carry both ``name`` and ``skills``.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import pydantic

from mol_tracker.core.constants import FORMAT_VERSION
from mol_tracker.core.exceptions import ValidationError
from mol_tracker.core.logging import get_logger
from mol_tracker.models.character import CharacterDocument
from mol_tracker.models.enums import ErrorKind
from mol_tracker.models.results import OperationResult


logger = get_logger(__name__)

REQUIRED_FIELDS = ("name", "skills")
ENVELOPE_FIELDS = ("version", "lastSaved", "exportedAt")


def encode_payload(
    document: CharacterDocument,
    *,
    timestamp_field: str | None = None,
    timestamp: datetime | None = None,
) -> dict[str, Any]:
    """Build the versioned dictionary written to storage.

    Args:
        document: Document to encode.
        timestamp_field: Envelope key for the timestamp (``lastSaved`` or
            ``exportedAt``); omitted when None.
        timestamp: Time to record, defaults to now.
    """
    payload = document.to_payload()
    if timestamp_field:
        payload[timestamp_field] = (timestamp or datetime.now()).isoformat()
    payload["version"] = FORMAT_VERSION
    return payload


def serialize(
    document: CharacterDocument,
    *,
    timestamp_field: str | None = None,
    timestamp: datetime | None = None,
) -> str:
    """Encode a document as human-readable, versioned JSON text."""
    payload = encode_payload(document, timestamp_field=timestamp_field, timestamp=timestamp)
    return json.dumps(payload, indent=2, ensure_ascii=False)


def parse_payload(text: str) -> dict[str, Any]:
    """Parse JSON text and check the required fields are present.

    Raises:
        ValidationError: The text is not a JSON object or lacks a required field.
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError) as exc:
        raise ValidationError(
            "Failed to load character file. Please check the file format.",
            details={"original_error": str(exc)},
        ) from exc

    if not isinstance(payload, dict):
        raise ValidationError("Invalid character file format.", invalid_value=type(payload).__name__)

    for field_name in REQUIRED_FIELDS:
        if field_name not in payload:
            raise ValidationError("Invalid character file format.", field_name=field_name)

    return payload


def decode_payload(
    payload: dict[str, Any],
    *,
    base: CharacterDocument | None = None,
) -> CharacterDocument:
    """Validate a payload into a document.

    Args:
        payload: Parsed character data.
        base: Document whose values fill any field the payload omits.

    Raises:
        ValidationError: A field has the wrong shape.
    """
    data = {k: v for k, v in payload.items() if k not in ENVELOPE_FIELDS}
    if base is not None:
        data = {**base.to_payload(), **data}

    try:
        return CharacterDocument.model_validate(data)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(
            "Invalid character file format.",
            field_name=".".join(str(part) for part in first["loc"]),
            details={"error_count": exc.error_count()},
        ) from exc


def load_document(text: str, *, base: CharacterDocument | None = None) -> CharacterDocument:
    """Parse and validate JSON text into a document.

    Raises:
        ValidationError: Malformed text, missing ``name``/``skills`` or bad fields.
    """
    return decode_payload(parse_payload(text), base=base)


def deserialize(text: str, *, base: CharacterDocument | None = None) -> OperationResult:
    """Decode JSON text into a document without raising.

    Returns:
        Result whose value is the new CharacterDocument, or a
        VALIDATION_ERROR failure describing what was wrong.
    """
    try:
        document = load_document(text, base=base)
    except ValidationError as exc:
        logger.warning("Rejected character data", error=exc.message, **exc.details)
        return OperationResult.fail(ErrorKind.VALIDATION_ERROR, exc.message, value=exc.details)
    return OperationResult.ok("Character decoded", value=document)


__all__ = [
    "REQUIRED_FIELDS",
    "encode_payload",
    "serialize",
    "parse_payload",
    "decode_payload",
    "load_document",
    "deserialize",
]

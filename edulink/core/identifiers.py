# edulink/core/identifiers.py
import uuid
from typing import Any

from edulink.core.errors import InvalidIdentifierError


def new_id() -> str:
    """Generate a fresh identifier in canonical form."""
    return uuid.uuid4().hex


def canonical_id(value: Any) -> str:
    """
    Normalize an identifier to its canonical string form.

    Strings keep their case and only lose surrounding whitespace, so "PA"
    and "pa" stay distinct. A hyphenated UUID collapses to its 32-digit
    lower-case hex form. UUID objects and raw bytes map to lower-case hex.
    Every other type is rejected: an int that prints like a stored id is a
    different identifier, not the same one.
    """
    if isinstance(value, uuid.UUID):
        return value.hex

    if isinstance(value, (bytes, bytearray)):
        if not value:
            raise InvalidIdentifierError(value, "empty identifier")
        return bytes(value).hex()

    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise InvalidIdentifierError(value, "empty identifier")
        if len(text) == 36 and text.count("-") == 4:
            try:
                return uuid.UUID(text).hex
            except ValueError:
                return text
        return text

    raise InvalidIdentifierError(value)


def same_id(left: Any, right: Any) -> bool:
    """Exact comparison of two identifiers after normalization."""
    return canonical_id(left) == canonical_id(right)

# assetledger/validation.py
"""
Field validation shared by asset creation and update.

Lengths are measured in UTF-8 bytes. Checks run in a fixed order
(name, size, description, tags) so the first violated constraint decides
the error kind.
"""

from typing import Any, List, Sequence

from .errors import CapacityExceeded, FormatValidation, InvalidParameters

MAX_NAME_BYTES = 64
MAX_DESCRIPTION_BYTES = 128
MAX_SIZE_BYTES = 1_000_000_000  # exclusive
MAX_TAGS = 10
MAX_TAG_BYTES = 32


def _byte_length(value: str) -> int:
    return len(value.encode("utf-8"))


def validate_name(name: Any) -> str:
    if not isinstance(name, str) or not 0 < _byte_length(name) <= MAX_NAME_BYTES:
        raise InvalidParameters(f"name must be 1-{MAX_NAME_BYTES} bytes")
    return name


def validate_size(size_bytes: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(size_bytes, bool) or not isinstance(size_bytes, int):
        raise CapacityExceeded("size_bytes must be an integer")
    if not 0 < size_bytes < MAX_SIZE_BYTES:
        raise CapacityExceeded(f"size_bytes must be in [1, {MAX_SIZE_BYTES})")
    return size_bytes


def validate_description(description: Any) -> str:
    if not isinstance(description, str) or not 0 < _byte_length(description) <= MAX_DESCRIPTION_BYTES:
        raise InvalidParameters(f"description must be 1-{MAX_DESCRIPTION_BYTES} bytes")
    return description


def validate_tags(tags: Any) -> List[str]:
    """
    Validate a tag list.

    Returns a fresh list so the caller's sequence is never aliased into
    the store.
    """
    if isinstance(tags, (str, bytes)) or not isinstance(tags, Sequence):
        raise FormatValidation("tags must be a list of strings")
    if not 0 < len(tags) <= MAX_TAGS:
        raise FormatValidation(f"tags must contain 1-{MAX_TAGS} entries")
    for tag in tags:
        if not isinstance(tag, str) or not 0 < _byte_length(tag) <= MAX_TAG_BYTES:
            raise FormatValidation(f"each tag must be 1-{MAX_TAG_BYTES} bytes")
    return list(tags)


def validate_asset_fields(name: Any, size_bytes: Any, description: Any, tags: Any) -> tuple:
    """Validate all content fields, returning them normalized."""
    return (
        validate_name(name),
        validate_size(size_bytes),
        validate_description(description),
        validate_tags(tags),
    )


def is_principal(value: Any) -> bool:
    """A principal is any non-empty string without whitespace."""
    return isinstance(value, str) and bool(value) and not any(c.isspace() for c in value)

"""Cleaning of partial update payloads"""

from collections.abc import Mapping
from typing import Any

IDENTIFIER_FIELD = "id"


def sanitize(fields: Mapping[str, Any], identifier: str = IDENTIFIER_FIELD) -> dict[str, Any]:
    """Drop absent (None) values and the identifier from an update payload.

    Falsy values such as "", False and 0 are kept so callers can clear a
    text field or switch a flag off.
    """
    return {
        key: value
        for key, value in fields.items()
        if value is not None and key != identifier
    }


def split_identifier(
    fields: Mapping[str, Any], identifier: str = IDENTIFIER_FIELD
) -> tuple[Any, dict[str, Any]]:
    """Return the record identifier and the sanitized remaining fields"""
    return fields.get(identifier), sanitize(fields, identifier)

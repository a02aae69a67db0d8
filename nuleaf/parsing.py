"""Explicit parsing of loosely typed request values"""

from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from nuleaf.errors import InvalidArgument, InvalidIdentifier

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})
_SLASH_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y")


def is_present(value: Any) -> bool:
    """None and the empty string both count as 'not supplied'"""
    return value is not None and value != ""


def parse_identifier(value: Any) -> UUID:
    """Parse a record id, raising InvalidIdentifier for anything malformed"""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise InvalidIdentifier(f"Not a valid id: {value!r}")
    try:
        return UUID(value)
    except ValueError as exc:
        raise InvalidIdentifier(f"Not a valid id: {value!r}") from exc


def parse_reference(field: str, value: Any) -> UUID:
    """Parse an id used as a filter value"""
    try:
        return parse_identifier(value)
    except InvalidIdentifier as exc:
        raise InvalidArgument(f"{field} must be a valid id") from exc


def parse_text(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidArgument(f"{field} must be a string")
    return value


def parse_bool(field: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise InvalidArgument(f"{field} must be a boolean")


def parse_datetime(field: str, value: Any) -> datetime:
    """Parse a timestamp; naive values are taken as UTC.

    Accepts datetime/date objects, ISO-8601 strings and MM/DD/YYYY or MM/DD/YY.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        parsed = _parse_datetime_text(field, value.strip())
    else:
        raise InvalidArgument(f"{field} must be a date")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_datetime_text(field: str, text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass

    for date_format in _SLASH_DATE_FORMATS:
        try:
            return datetime.strptime(text, date_format)
        except ValueError:
            continue

    raise InvalidArgument(f"{field} is not a valid date: {text!r}")


def parse_count(value: Any) -> int | None:
    """Lenient integer parsing for pagination; None when not a whole number"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return parse_count(float(text))
        except (ValueError, OverflowError):
            return None
    return None

"""
Request payload helpers.

Partial updates distinguish a field that is absent from the payload
(``MISSING``: keep the stored value) from a field that is present with
``None`` or an empty string (the caller asked for that value).
"""
from __future__ import annotations

from datetime import datetime, timezone

from books_service.errors import ValidationError


class _Missing:
    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


def field(data: dict, key: str):
    return data[key] if key in data else MISSING


def require_text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None or not str(value).strip():
        raise ValidationError(f"{key} is required")
    return str(value).strip()


def optional_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def to_int(value, key: str, minimum: int | None = None) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{key} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{key} must be >= {minimum}")
    return number


def optional_int(value, key: str):
    if value is None or value == "":
        return None
    return to_int(value, key)


def to_datetime(value, key: str) -> datetime:
    """Parse an ISO-8601 date or datetime into a naive UTC datetime."""
    if not value or not isinstance(value, str):
        raise ValidationError(f"{key} is required")
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ValidationError(f"{key} must be an ISO-8601 date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def json_body(request) -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("JSON object expected")
    return data

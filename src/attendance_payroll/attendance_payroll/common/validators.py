from __future__ import annotations

import re
from typing import Any, Iterable

from ..core.constants import WEEKDAYS
from ..core.exceptions import ValidationError

_MOBILE_RE = re.compile(r"^[0-9]{10}$")
_NAME_RE = re.compile(r"^[A-Za-z\s]+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_coordinates(location: Any) -> tuple[float, float]:
    """Latitude/longitude must both be real numbers (bools are rejected)."""
    if not isinstance(location, dict):
        raise ValidationError("Invalid or missing location data")
    lat = location.get("latitude")
    lon = location.get("longitude")
    for v in (lat, lon):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValidationError("Invalid or missing location data")
    return float(lat), float(lon)


def require_mobile(value: str) -> str:
    if not _MOBILE_RE.match(value or ""):
        raise ValidationError("Invalid mobile number format")
    return value


def require_person_name(value: str) -> str:
    value = require_non_empty(value, "Name")
    if not _NAME_RE.match(value):
        raise ValidationError("Invalid name format")
    return value


def require_weekdays(days: Iterable[Any]) -> tuple[str, ...]:
    if not isinstance(days, (list, tuple)) or not all(isinstance(d, str) and d in WEEKDAYS for d in days):
        raise ValidationError("Invalid weekoff days")
    return tuple(days)


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is invalid")
    if number <= 0:
        raise ValidationError(f"{field_name} is invalid")
    return number

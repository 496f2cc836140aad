from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_length(value: Optional[str], field_name: str, bounds: tuple[int, int]) -> str:
    value = require_non_empty(value, field_name)
    lo, hi = bounds
    if not lo <= len(value) <= hi:
        raise ValidationError(f"{field_name} must be between {lo} and {hi} characters")
    return value


def require_email(value: Optional[str], field_name: str = "email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.match(value):
        raise ValidationError(f"{field_name} must be a valid email address")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be a positive integer")
    return number


def optional_text(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    return value


def parse_path_id(value: Any, message: str) -> int:
    """Path ids arrive as strings; anything but a positive integer is a 400."""

    try:
        return require_positive_int(value, "id")
    except ValidationError:
        raise ValidationError(message, detail=str(value))

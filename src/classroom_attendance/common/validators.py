from __future__ import annotations

import re
from typing import Any

from ..core.exceptions import ValidationError

_EMAIL_MAX_LENGTH = 254
_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def normalize_email(value: str | None) -> str:
    """Emails are optional; when given they are lower-cased and checked."""
    email = (value or "").strip().lower()
    if email and (len(email) > _EMAIL_MAX_LENGTH or not _EMAIL_RE.match(email)):
        raise ValidationError("Please enter a valid email")
    return email


def require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None

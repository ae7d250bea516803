from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Flask, current_app, request

from ..core.exceptions import ValidationError
from .datetime_utils import parse_optional_date


def date_arg(name: str = "date") -> Optional[date]:
    """Optional YYYY-MM-DD query argument."""
    try:
        return parse_optional_date(request.args.get(name))
    except ValueError:
        raise ValidationError(f"Invalid {name}, expected YYYY-MM-DD") from None


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def public_base_url(app: Optional[Flask] = None) -> str:
    app = app or current_app
    return (app.config.get("PUBLIC_BASE_URL") or request.host_url).rstrip("/")

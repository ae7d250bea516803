"""Session token wire format.

A token travels as compact JSON ``{"courseId", "sessionId", "timestamp"}``.
The same JSON may arrive embedded in the ``data`` query parameter of the
student scanner URL, or inside a QR image.
"""

from __future__ import annotations

import base64
import io
import json
from datetime import datetime
from typing import Any, BinaryIO, Mapping, Union
from urllib.parse import parse_qs, urlencode, urlsplit

import qrcode
from PIL import Image

from ..common.datetime_utils import to_local_naive
from ..common.validators import require_int
from ..core.constants import SCAN_PAGE_PATH, SCAN_URL_PARAM, SESSION_ID_MAX_LENGTH
from ..core.exceptions import ValidationError
from .model import SessionToken

TokenPayload = Union[SessionToken, Mapping[str, Any], str, bytes]


def token_to_dict(token: SessionToken) -> dict:
    return {
        "courseId": token.course_id,
        "sessionId": token.session_id,
        "timestamp": token.issued_at.isoformat(),
    }


def encode_token(token: SessionToken) -> str:
    return json.dumps(token_to_dict(token), separators=(",", ":"))


def build_scan_url(base_url: str, token: SessionToken) -> str:
    base = base_url.rstrip("/")
    return f"{base}{SCAN_PAGE_PATH}?{urlencode({SCAN_URL_PARAM: encode_token(token)})}"


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Invalid QR code data: missing timestamp")
    text = value.strip()
    # fromisoformat() only learned the 'Z' suffix in 3.11
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_local_naive(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError("Invalid QR code data: bad timestamp") from None


def _from_mapping(data: Mapping[str, Any]) -> SessionToken:
    missing = [k for k in ("courseId", "sessionId", "timestamp") if data.get(k) in (None, "")]
    if missing:
        raise ValidationError(f"Invalid QR code data: missing {', '.join(missing)}")

    session_id = data["sessionId"]
    if not isinstance(session_id, str) or not session_id.strip():
        raise ValidationError("Invalid QR code data: bad sessionId")
    session_id = session_id.strip()
    # must fit attendance_records.session_id
    if len(session_id) > SESSION_ID_MAX_LENGTH:
        raise ValidationError("Invalid QR code data: bad sessionId")

    try:
        course_id = require_int(data["courseId"], "courseId")
    except ValidationError:
        raise ValidationError("Invalid QR code data: bad courseId") from None

    return SessionToken(
        course_id=course_id,
        session_id=session_id,
        issued_at=_parse_timestamp(data["timestamp"]),
    )


def _json_from_text(text: str) -> Any:
    if not text.startswith(("{", "[")):
        query = parse_qs(urlsplit(text).query)
        values = query.get(SCAN_URL_PARAM)
        if not values:
            raise ValidationError("Invalid QR code data")
        text = values[0].strip()
    try:
        return json.loads(text)
    except ValueError:
        raise ValidationError("Invalid QR code data") from None


def decode_token(payload: TokenPayload) -> SessionToken:
    """Rebuild a SessionToken from any transport the caller received it on."""
    if isinstance(payload, SessionToken):
        return payload
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    if isinstance(payload, str):
        text = payload.strip()
        if not text:
            raise ValidationError("QR code data is required")
        payload = _json_from_text(text)
    if not isinstance(payload, Mapping):
        raise ValidationError("Invalid QR code data")
    return _from_mapping(payload)


def render_qr_png(data: str) -> bytes:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=2,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def qr_data_url(data: str) -> str:
    encoded = base64.b64encode(render_qr_png(data)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def decode_qr_image(stream: BinaryIO) -> str:
    """Return the text of the first QR code found in an uploaded image."""
    # pyzbar loads the native zbar library on import
    from pyzbar.pyzbar import decode as pyzbar_decode

    try:
        img = Image.open(stream).convert("RGB")
    except (OSError, ValueError):
        raise ValidationError("Uploaded file is not a readable image") from None

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code detected in the image")
    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError:
        raise ValidationError("Invalid QR code data") from None

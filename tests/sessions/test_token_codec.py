from __future__ import annotations

import io
import json
from datetime import datetime, timezone
from types import SimpleNamespace
from urllib.parse import quote

import pytest
from PIL import Image

from classroom_attendance.core.exceptions import ValidationError
from classroom_attendance.sessions.codec import (
    build_scan_url,
    decode_qr_image,
    decode_token,
    encode_token,
    qr_data_url,
    render_qr_png,
)
from classroom_attendance.sessions.model import SessionToken


def _token() -> SessionToken:
    return SessionToken(course_id=7, session_id="a" * 32, issued_at=datetime(2026, 3, 2, 9, 0, 0))


def test_encoded_token_uses_wire_field_names():
    payload = json.loads(encode_token(_token()))

    assert payload == {"courseId": 7, "sessionId": "a" * 32, "timestamp": "2026-03-02T09:00:00"}


def test_decode_accepts_scanner_url():
    url = build_scan_url("http://school.example/", _token())

    assert url.startswith("http://school.example/student?data=")
    assert decode_token(url) == _token()


def test_decode_accepts_dict_and_string_course_id():
    token = decode_token({"courseId": "7", "sessionId": "a" * 32, "timestamp": "2026-03-02T09:00:00"})

    assert token.course_id == 7


def test_decode_accepts_session_id_at_column_width():
    token = decode_token({"courseId": 1, "sessionId": "x" * 64, "timestamp": "2026-03-02T09:00:00"})

    assert token.session_id == "x" * 64


def test_decode_converts_utc_timestamp_to_local_time():
    utc = datetime(2026, 3, 2, 9, 0, 0, tzinfo=timezone.utc)
    raw = json.dumps({"courseId": 1, "sessionId": "s1", "timestamp": "2026-03-02T09:00:00.000Z"})

    token = decode_token(raw)

    assert token.issued_at.tzinfo is None
    assert token.issued_at == utc.astimezone().replace(tzinfo=None)


@pytest.mark.parametrize(
    "payload",
    [
        "",
        "not json",
        "{broken",
        "http://school.example/student?other=1",
        "http://school.example/student?data=" + quote("{oops"),
        json.dumps({"sessionId": "s1", "timestamp": "2026-03-02T09:00:00"}),
        json.dumps({"courseId": 1, "timestamp": "2026-03-02T09:00:00"}),
        json.dumps({"courseId": 1, "sessionId": "s1"}),
        json.dumps({"courseId": "abc", "sessionId": "s1", "timestamp": "2026-03-02T09:00:00"}),
        json.dumps({"courseId": 1, "sessionId": 5, "timestamp": "2026-03-02T09:00:00"}),
        json.dumps({"courseId": 1, "sessionId": "x" * 65, "timestamp": "2026-03-02T09:00:00"}),
        json.dumps({"courseId": 1, "sessionId": "s1", "timestamp": "yesterday"}),
        json.dumps([1, 2, 3]),
    ],
)
def test_decode_rejects_malformed_payloads(payload):
    with pytest.raises(ValidationError):
        decode_token(payload)


def test_qr_png_is_a_png_image():
    png = render_qr_png(encode_token(_token()))

    assert png.startswith(b"\x89PNG")
    assert qr_data_url("hello").startswith("data:image/png;base64,")


def _blank_png() -> io.BytesIO:
    buf = io.BytesIO()
    Image.new("RGB", (20, 20), "white").save(buf, format="PNG")
    buf.seek(0)
    return buf


def test_qr_image_with_non_utf8_bytes_is_a_validation_error(monkeypatch):
    pyzbar = pytest.importorskip("pyzbar.pyzbar")
    monkeypatch.setattr(pyzbar, "decode", lambda img: [SimpleNamespace(data=b"\xff\xfe\x00bad")])

    with pytest.raises(ValidationError, match="Invalid QR code data"):
        decode_qr_image(_blank_png())


def test_qr_image_text_is_returned(monkeypatch):
    pyzbar = pytest.importorskip("pyzbar.pyzbar")
    monkeypatch.setattr(pyzbar, "decode", lambda img: [SimpleNamespace(data=b' {"courseId":1} ')])

    assert decode_qr_image(_blank_png()) == '{"courseId":1}'

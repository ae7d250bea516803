from __future__ import annotations

import time

import pytest

from classroom_attendance.common.validators import normalize_email
from classroom_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Ann@Uni.EDU", "ann@uni.edu"),
        ("first.last+tag@mail.school-district.org", "first.last+tag@mail.school-district.org"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_email_accepts_valid_and_blank(raw, expected):
    assert normalize_email(raw) == expected


@pytest.mark.parametrize("raw", ["nope", "a@b", "a@@b.com", "@uni.edu", "ann@uni.e"])
def test_normalize_email_rejects_invalid(raw):
    with pytest.raises(ValidationError):
        normalize_email(raw)


@pytest.mark.parametrize("raw", ["a" * 40 + "!", "a" * 200 + "@" + "b" * 40 + "!", "a.b-" * 60 + "!", "x" * 5000])
def test_normalize_email_rejects_long_garbage_quickly(raw):
    started = time.perf_counter()

    with pytest.raises(ValidationError):
        normalize_email(raw)

    assert time.perf_counter() - started < 0.5

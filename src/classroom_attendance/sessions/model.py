from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import SESSION_TOKEN_TTL_SECONDS


@dataclass(frozen=True)
class SessionToken:
    """Self-describing attendance session descriptor.

    A token carries everything needed to validate it; nothing about it is
    looked up in the store.
    """

    course_id: int
    session_id: str
    issued_at: datetime

    @property
    def expires_at(self) -> datetime:
        return self.issued_at + timedelta(seconds=SESSION_TOKEN_TTL_SECONDS)

    def age_seconds(self, now: datetime) -> float:
        return (now - self.issued_at).total_seconds()

    def is_expired(self, now: datetime) -> bool:
        return self.age_seconds(now) > SESSION_TOKEN_TTL_SECONDS


@dataclass(frozen=True)
class IssuedSession:
    token: SessionToken
    encoded_token: str
    scan_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "courseId": self.token.course_id,
            "sessionId": self.token.session_id,
            "issuedAt": self.token.issued_at.isoformat(),
            "expiresAt": self.token.expires_at.isoformat(),
            "encodedToken": self.encoded_token,
            "scanUrl": self.scan_url,
        }

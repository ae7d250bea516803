class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid, e.g. a malformed token payload."""

    code = "validation_error"


class NotFoundError(DomainError):
    """Raised when a referenced course or student does not exist."""

    code = "not_found"
    http_status = 404


class NotEnrolledError(DomainError):
    """Raised when a student scans a token for a course they are not enrolled in."""

    code = "not_enrolled"


class ExpiredTokenError(DomainError):
    """Raised when a session token is presented after its validity window."""

    code = "expired"


class AlreadyRecordedError(DomainError):
    """Raised when attendance already exists for the (course, student, session) triple."""

    code = "already_recorded"
    http_status = 409


class ConflictOnWriteError(AlreadyRecordedError):
    """Raised when the store's uniqueness constraint rejects a concurrent insert."""

    code = "conflict_on_write"

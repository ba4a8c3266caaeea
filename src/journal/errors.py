"""Typed failures raised by the journal core."""


class JournalError(Exception):
    """Base journal error."""

    code = "JOURNAL_ERROR"
    status_code = 500


class NotFoundError(JournalError):
    """Entry, category or user does not exist (or is not owned by the caller)."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ValidationError(JournalError):
    """Malformed input."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DuplicateError(JournalError):
    code = "DUPLICATE"
    status_code = 409

    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists")
        self.resource = resource


class ServiceUnavailableError(JournalError):
    """Optional enrichment call failed or timed out."""

    code = "SERVICE_UNAVAILABLE"
    status_code = 503


class DatabaseError(JournalError):
    """Persistence failure; the surrounding transaction was rolled back."""

    code = "DATABASE_ERROR"
    status_code = 500

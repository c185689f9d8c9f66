"""
Application Errors
Raised by the services and rendered as JSON by the handlers in main.
"""
from typing import Any, Dict, List, Optional


class FarmLedgerError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class RecordValidationError(FarmLedgerError):
    """Input failed schema validation. Carries field-level details."""

    status_code = 400
    default_message = "Validation error"

    def __init__(self, details: List[Dict[str, Any]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class ConflictError(FarmLedgerError):
    """A uniqueness rule would be violated."""

    status_code = 400
    default_message = "Record already exists"


class NotFoundError(FarmLedgerError):
    """The referenced record does not exist."""

    status_code = 404
    default_message = "Record not found"


class InternalError(FarmLedgerError):
    """Unexpected persistence or runtime failure."""

    status_code = 500

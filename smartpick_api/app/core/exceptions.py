"""
Exception types raised by the service layer.

Services raise these instead of ``HTTPException`` so they stay usable
outside of a request.  Each carries the HTTP status the endpoints
translate it into.
"""

from typing import Any, Dict, Optional


class SmartPickError(Exception):
    """Base exception for SmartPick errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class UnauthorizedError(SmartPickError):
    """Raised when a request carries no usable bearer token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=401)


class ForbiddenError(SmartPickError):
    """Raised for invalid tokens and for acting on someone else's record."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, status_code=403)


class NotFoundError(SmartPickError):
    """Raised when a referenced record does not exist."""

    def __init__(self, resource: str, record_id: str):
        super().__init__(
            message=f"{resource} not found",
            status_code=404,
            details={"id": record_id},
        )


class InvalidIdentifierError(SmartPickError):
    """Raised when an id cannot be parsed as a store identifier."""

    def __init__(self, value: Any):
        super().__init__(
            message=f"Invalid id: {value!r}",
            status_code=400,
            details={"id": str(value)},
        )

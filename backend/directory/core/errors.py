"""Domain error kinds raised by the persistence gateway and the API layer.

Every error maps to one HTTP status and renders as a failure envelope
(``ok`` false, ``message``, optional ``errors``).
"""

from __future__ import annotations

from typing import Any


class DirectoryError(Exception):
    http_status: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None, errors: list[str] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    def to_envelope(self) -> dict[str, Any]:
        envelope: dict[str, Any] = {"ok": False, "message": self.message}
        if self.errors:
            envelope["errors"] = self.errors
        return envelope


class ValidationFailure(DirectoryError):
    http_status = 400
    default_message = "Validation Error"


class NotFoundError(DirectoryError):
    http_status = 404
    default_message = "Employee not found"


class ConflictError(DirectoryError):
    # Duplicate email is reported as a client error, same as validation.
    http_status = 400
    default_message = "Employee with this email already exists"


class UnexpectedError(DirectoryError):
    http_status = 500
    default_message = "Server Error"


class StoreUnavailableError(UnexpectedError):
    default_message = "Employee store is not configured"

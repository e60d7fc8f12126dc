"""Error taxonomy shared by the auth layer and the HTTP boundary.

The entity store and session registry never raise these: absence is a
value there. The auth service and authorization gate are the first layer
allowed to raise, and the web layer alone maps each kind to a status code.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(slots=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class FieldFlowError(Exception):
    """Base class for errors with a defined HTTP mapping."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(FieldFlowError):
    """Malformed or missing input fields."""

    status_code = 400
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, errors: list[FieldError] | None = None):
        self.errors = list(errors or [])
        super().__init__(message, details=[e.to_dict() for e in self.errors])

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(errors=[FieldError(field=field, message=message)])


class AuthenticationError(FieldFlowError):
    """Missing, invalid or expired session; or rejected credentials."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(FieldFlowError):
    """Valid session, insufficient role or ownership."""

    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(FieldFlowError):
    status_code = 404
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str) -> NotFoundError:
        return cls(f"{resource} not found")


class InternalError(FieldFlowError):
    status_code = 500

"""
Application error taxonomy.

Services raise AppError with an ErrorKind; the HTTP layer turns the kind
into a status code in exactly one place (see STATUS_BY_KIND).
"""

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not_found"
    INFRASTRUCTURE = "infrastructure"


# Every ErrorKind must have an entry
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.INFRASTRUCTURE: 500,
}


class AppError(Exception):
    """A failure with a user-visible, single-sentence message"""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        fields: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.fields = fields or {}

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"AppError({self.kind.value!r}, {self.message!r})"


def validation_error(fields: Dict[str, str], message: str = "Validation failed") -> AppError:
    return AppError(ErrorKind.VALIDATION, message, fields)


def unauthenticated(message: str = "Could not validate credentials") -> AppError:
    return AppError(ErrorKind.UNAUTHENTICATED, message)


def infrastructure_error(message: str) -> AppError:
    return AppError(ErrorKind.INFRASTRUCTURE, message)

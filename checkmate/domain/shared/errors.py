"""Domain error taxonomy.

Errors are classified by kind rather than by concrete exception type.
Interfaces map each kind to a user-facing response (exit code, HTTP status).
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Category of a domain failure."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    INVALID_TRANSITION = "invalid_transition"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True, slots=True)
class DomainError:
    """A rule violation detected by the domain.

    Attributes:
        kind: Category of the failure.
        message: Human-readable explanation.
    """

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


def not_found(message: str) -> DomainError:
    return DomainError(ErrorKind.NOT_FOUND, message)


def validation(message: str) -> DomainError:
    return DomainError(ErrorKind.VALIDATION, message)


def invalid_transition(message: str) -> DomainError:
    return DomainError(ErrorKind.INVALID_TRANSITION, message)


def forbidden(message: str) -> DomainError:
    return DomainError(ErrorKind.FORBIDDEN, message)


class ExpressionError(Exception):
    """Raised by an expression engine when an expression cannot be compiled or evaluated."""

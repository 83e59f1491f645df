"""Shared domain building blocks.

This package provides common pieces used across domain modules:

- Result type for explicit error handling
- DomainError taxonomy (not found, validation, invalid transition, forbidden)
- Base domain event

Example usage:
    >>> from checkmate.domain.shared import Err, Ok, Result, validation
    >>>
    >>> def parse_capacity(raw: str) -> Result[int, DomainError]:
    ...     if not raw.isdigit():
    ...         return Err(validation("Capacity must be a whole number"))
    ...     return Ok(int(raw))
"""

from checkmate.domain.shared.errors import (
    DomainError,
    ErrorKind,
    ExpressionError,
    forbidden,
    invalid_transition,
    not_found,
    validation,
)
from checkmate.domain.shared.events import DomainEvent
from checkmate.domain.shared.result import (
    Err,
    Ok,
    Result,
    flat_map,
    is_err,
    is_ok,
    map_result,
    unwrap_or,
)

__all__ = [
    # Result
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "flat_map",
    "unwrap_or",
    # Errors
    "DomainError",
    "ErrorKind",
    "ExpressionError",
    "not_found",
    "validation",
    "invalid_transition",
    "forbidden",
    # Events
    "DomainEvent",
]

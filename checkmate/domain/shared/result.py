"""Result type for explicit failure handling in domain operations.

Every mutating operation on an aggregate returns either ``Ok(updated)`` or
``Err(DomainError)``. Invariant violations are values, not exceptions, so a
caller always decides what to do with a failure and never ends up holding a
half-updated aggregate.

Example usage:
    >>> result = task.complete(now)
    >>> if is_ok(result):
    ...     repository.save(result.value)
    ... else:
    ...     print(result.error.message)
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The value produced by the operation.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: Description of what went wrong.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007


def is_ok(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is Ok."""
    return isinstance(result, Ok)


def is_err(result: Ok[T] | Err[E]) -> bool:
    """Return True if the result is Err."""
    return isinstance(result, Err)


def map_result(result: Ok[T] | Err[E], fn: Callable[[T], U]) -> Ok[U] | Err[E]:
    """Transform the value of an Ok result, passing Err through untouched.

    Args:
        result: The result to transform.
        fn: Function applied to the Ok value.

    Returns:
        Ok(fn(value)) or the original Err.
    """
    if isinstance(result, Ok):
        return Ok(fn(result.value))
    return result


def flat_map(result: Ok[T] | Err[E], fn: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
    """Chain an operation that itself returns a Result.

    Used to sequence aggregate operations, e.g. validating tag points and
    then building the task that holds them. The first Err short-circuits.

    Args:
        result: The result to chain from.
        fn: Function taking the Ok value and returning a new Result.

    Returns:
        The Result of fn, or the original Err.
    """
    if isinstance(result, Ok):
        return fn(result.value)
    return result


def unwrap_or(result: Ok[T] | Err[E], default: T) -> T:
    """Return the Ok value, or default when the result is Err."""
    if isinstance(result, Ok):
        return result.value
    return default

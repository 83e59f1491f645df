"""Expression evaluator interface.

Routines use expressions for two things: deciding whether the routine is
live (evaluated against a time context) and deciding which tasks belong to
it (evaluated against a task context). Inside an expression the predicates
``hasTag(name)``, ``hasAnyTag(a, b, ...)`` and ``hasAllTags(a, b, ...)`` must
be available; they look at the ``tags`` list of the context.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from checkmate.domain.shared.errors import ExpressionError


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of checking an expression or rule without running it."""

    valid: bool
    error: str | None = None


class CompiledFilter(Protocol):
    """A parsed expression that can be evaluated repeatedly."""

    def evaluate(self, context: Mapping[str, Any]) -> bool:
        """Return True if the context matches. Raises ExpressionError."""
        ...


class ExpressionEvaluator(Protocol):
    """Interface for any boolean expression engine."""

    def compile(self, expression: str) -> CompiledFilter:
        """Parse an expression once. Raises ExpressionError if invalid."""
        ...

    def validate(self, expression: str) -> ValidationResult:
        """Check an expression without evaluating it."""
        ...

    def evaluate(self, expression: str, context: Mapping[str, Any]) -> bool:
        """Compile and evaluate in one step. Raises ExpressionError."""
        ...

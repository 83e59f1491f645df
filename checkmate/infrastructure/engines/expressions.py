"""Expression evaluator backed by simpleeval.

Expressions are Python-style boolean expressions over the names of the
context, e.g. ``is_weekday and 540 <= time < 720`` or
``hasAnyTag("work", "admin") and points >= 3``.
"""

import ast
from collections.abc import Callable, Mapping
from typing import Any

from simpleeval import InvalidExpression, SimpleEval

from checkmate.domain.shared.errors import ExpressionError
from checkmate.ports.expression_evaluator import ValidationResult

TAG_FUNCTIONS = ("hasTag", "hasAnyTag", "hasAllTags")

# Available in every expression besides the tag predicates
BASE_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "len": len,
    "str": str,
    "int": int,
    "float": float,
    "min": min,
    "max": max,
}

# Runtime failures an expression can trigger on bad input
_EVALUATION_ERRORS = (InvalidExpression, ArithmeticError, TypeError, ValueError, KeyError, AttributeError)


def _tag_functions(context: Mapping[str, Any]) -> dict[str, Callable[..., bool]]:
    """Tag predicates bound to the ``tags`` list of a context."""
    raw = context.get("tags")
    tags = {str(t) for t in raw} if isinstance(raw, (list, tuple, set, frozenset)) else None

    def has_tag(name: Any) -> bool:
        return tags is not None and str(name) in tags

    def has_any_tag(*names: Any) -> bool:
        return tags is not None and any(str(n) in tags for n in names)

    def has_all_tags(*names: Any) -> bool:
        return tags is not None and all(str(n) in tags for n in names)

    return {"hasTag": has_tag, "hasAnyTag": has_any_tag, "hasAllTags": has_all_tags}


def _parse(expression: str) -> ast.AST:
    if not expression or not expression.strip():
        raise ExpressionError("Expression cannot be empty")
    try:
        return SimpleEval().parse(expression)
    except SyntaxError as e:
        raise ExpressionError(f"Invalid expression: {e.msg}") from e


def _unknown_function(tree: ast.AST) -> str | None:
    known = set(BASE_FUNCTIONS) | set(TAG_FUNCTIONS)
    for node in ast.walk(tree):
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
            if node.func.id not in known:
                return node.func.id
    return None


class SimpleEvalFilter:
    """A parsed expression, evaluated against a fresh context each call."""

    def __init__(self, expression: str, parsed: ast.AST) -> None:
        self._expression = expression
        self._parsed = parsed

    @property
    def expression(self) -> str:
        return self._expression

    def evaluate(self, context: Mapping[str, Any]) -> bool:
        engine = SimpleEval(
            names=dict(context),
            functions={**BASE_FUNCTIONS, **_tag_functions(context)},
        )
        try:
            return bool(engine.eval(self._expression, previously_parsed=self._parsed))
        except _EVALUATION_ERRORS as e:
            raise ExpressionError(f"Could not evaluate {self._expression!r}: {e}") from e


class SimpleEvalExpressionEvaluator:
    """ExpressionEvaluator implementation using simpleeval."""

    def compile(self, expression: str) -> SimpleEvalFilter:
        parsed = _parse(expression)
        unknown = _unknown_function(parsed)
        if unknown:
            raise ExpressionError(f"Unknown function: {unknown}")
        return SimpleEvalFilter(expression.strip(), parsed)

    def validate(self, expression: str) -> ValidationResult:
        try:
            self.compile(expression)
        except ExpressionError as e:
            return ValidationResult(valid=False, error=str(e))
        return ValidationResult(valid=True)

    def evaluate(self, expression: str, context: Mapping[str, Any]) -> bool:
        return self.compile(expression).evaluate(context)

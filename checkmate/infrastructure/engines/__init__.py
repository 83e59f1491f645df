"""Engine adapters: expression evaluation and recurrence expansion."""

from checkmate.infrastructure.engines.expressions import (
    SimpleEvalExpressionEvaluator,
    SimpleEvalFilter,
)
from checkmate.infrastructure.engines.recurrence import RRuleRecurrenceCalculator

__all__ = [
    "SimpleEvalExpressionEvaluator",
    "SimpleEvalFilter",
    "RRuleRecurrenceCalculator",
]

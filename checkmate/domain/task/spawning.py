"""Recurring task spawning.

Templates carry an RRULE; instances are ordinary backlog tasks whose
``parent_id`` points back at the template. Spawning is on demand for a
date range and never creates more instances than the rule has occurrences
in that range.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from checkmate.domain.shared import Err
from checkmate.domain.task.models import Task

if TYPE_CHECKING:
    from checkmate.ports.recurrence import RecurrenceCalculator

logger = logging.getLogger(__name__)


def count_instances(instances: Iterable[Task]) -> Counter[str]:
    """Number of existing instances per template id."""
    return Counter(t.parent_id for t in instances if t.parent_id is not None)


def spawn_due_instances(
    templates: Iterable[Task],
    existing_instances: Iterable[Task],
    start: datetime,
    end: datetime,
    calculator: "RecurrenceCalculator",
    now: datetime,
) -> list[Task]:
    """Create the instances still owed for each template in [start, end].

    Args:
        templates: Candidate templates; tasks without a rule are ignored.
        existing_instances: Already spawned tasks, matched by ``parent_id``.
        start: Range start.
        end: Range end (inclusive).
        calculator: Recurrence engine that expands the rules.
        now: Creation instant of the new instances.

    Returns:
        Newly created instances (not yet persisted).
    """
    if start > end:
        return []

    existing = count_instances(existing_instances)
    spawned: list[Task] = []

    for template in templates:
        if not template.is_template or not template.is_active:
            continue

        occurrences = calculator.occurrences(template.recurrence, start, end)
        needed = len(occurrences) - existing[template.id]
        for _ in range(max(needed, 0)):
            instance = template.spawn_instance(now)
            if isinstance(instance, Err):
                logger.error(f"Could not spawn from template {template.id}: {instance.error}")
                break
            spawned.append(instance.value)

        if needed > 0:
            logger.info(f"Spawned {needed} instance(s) of '{template.title}'")

    return spawned

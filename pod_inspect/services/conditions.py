from __future__ import annotations

from collections.abc import Iterable

from pod_inspect.models.pod import PodCondition

CONDITION_TRUE = "True"
POD_COMPLETED_REASON = "PodCompleted"


def filter_failed_conditions(conditions: Iterable[PodCondition]) -> list[PodCondition]:
    """Keep conditions that are not satisfied and not a normal completion."""
    return [
        condition
        for condition in conditions
        if condition.status != CONDITION_TRUE and condition.reason != POD_COMPLETED_REASON
    ]

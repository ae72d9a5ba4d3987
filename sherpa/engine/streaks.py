"""Streak qualification over a day's materialized instances."""

import math
from typing import Iterable

from sherpa.models.constants import STREAK_COMPLETION_RATIO
from sherpa.models.instance import CompletionState, Instance


def qualifies_for_streak(instances: Iterable[Instance]) -> bool:
    """Return True if enough of the day's habit instances were completed.

    Task instances and habits skipped with a note are not eligible. At least
    40% of the eligible instances (and never fewer than one) must be completed.
    """
    eligible = [
        i for i in instances
        if i.is_habit and i.status != CompletionState.SKIPPED_WITH_NOTE
    ]
    if not eligible:
        return False

    completed = sum(1 for i in eligible if i.status == CompletionState.COMPLETED)
    threshold = max(1, math.ceil(len(eligible) * STREAK_COMPLETION_RATIO))
    return completed >= threshold

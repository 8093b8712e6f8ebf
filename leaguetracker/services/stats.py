# leaguetracker/services/stats.py

# SECTION: MODULE DOCSTRING
"""Summary statistics over a (possibly filtered) list of tasks."""

# SECTION: IMPORTS
from __future__ import annotations

import math
from collections import Counter
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from leaguetracker.models.task import Task, TaskTier

UNKNOWN_REGION = "Unknown"


def _percent(part: int, whole: int) -> int:
    """Whole percentage, halves rounded up."""
    if whole <= 0:
        return 0
    return math.floor(part * 100 / whole + 0.5)


# KLASS: TaskStats
class TaskStats(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    total: int = 0
    visible: int = 0
    completed: int = 0
    remaining: int = 0
    total_points: int = 0
    earned_points: int = 0
    remaining_points: int = 0
    completion_percentage: int = 0
    completed_by_tier: dict[TaskTier, int] = Field(default_factory=dict)
    completed_by_region: dict[str, int] = Field(default_factory=dict)
    total_by_region: dict[str, int] = Field(default_factory=dict)


# FUNC: compute_stats
def compute_stats(tasks: Iterable[Task], total_known_tasks: int) -> TaskStats:
    """Summarise ``tasks`` against the league's full task count.

    ``total`` and ``completion_percentage`` refer to ``total_known_tasks``;
    point sums and the per-region breakdowns cover only the tasks passed in.
    """
    tasks = list(tasks)
    done = [task for task in tasks if task.completed]

    total_points = sum(task.points for task in tasks)
    earned_points = sum(task.points for task in done)

    by_tier = {tier: 0 for tier in TaskTier}
    by_tier.update(Counter(task.tier for task in done))

    return TaskStats(
        total=total_known_tasks,
        visible=len(tasks),
        completed=len(done),
        remaining=total_known_tasks - len(done),
        total_points=total_points,
        earned_points=earned_points,
        remaining_points=total_points - earned_points,
        completion_percentage=_percent(len(done), total_known_tasks),
        completed_by_tier=by_tier,
        completed_by_region=dict(Counter(task.region or UNKNOWN_REGION for task in done)),
        total_by_region=dict(Counter(task.region or UNKNOWN_REGION for task in tasks)),
    )

# leaguetracker/models/task.py

# ─── Title ────────────────────────────────────────────────────────────────────
#         League Task Models (Task, TaskTier, TaskList)
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Defines the Pydantic model for a single league task, the tier bands derived
from its points, and a TaskList container with the filtering and sorting used
by every consumer of the catalog.
"""

# SECTION: IMPORTS
from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    computed_field,
    field_validator,
)

from leaguetracker.helpers._logger import log

# SECTION: TIERS


# ENUM: TaskTier
class TaskTier(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    ELITE = "Elite"
    MASTER = "Master"


# Upper bound (inclusive) of each tier except the last.
TIER_BOUNDS: tuple[tuple[int, TaskTier], ...] = (
    (10, TaskTier.EASY),
    (30, TaskTier.MEDIUM),
    (80, TaskTier.HARD),
    (200, TaskTier.ELITE),
)
TIER_ORDER: dict[TaskTier, int] = {tier: rank for rank, tier in enumerate(TaskTier, start=1)}


# FUNC: compute_tier
def compute_tier(points: int) -> TaskTier:
    """Map a point value to its tier. Boundary values belong to the lower tier."""
    for upper, tier in TIER_BOUNDS:
        if points <= upper:
            return tier
    return TaskTier.MASTER


# SECTION: TASK MODEL


# KLASS: Task
class Task(BaseModel):
    """One row of the league task catalog, optionally with a player's completion flag."""

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        validate_assignment=True,
    )

    id: str
    locality: str = ""
    region: str = "Unknown"
    area: str = ""
    description: str
    details: str = ""
    requirements: str = ""
    points: int = Field(..., gt=0)
    community_completion_percent: float = 0.0
    completed: bool = False

    @field_validator("id", "description", mode="after")
    @classmethod
    def check_required_text(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if not value:
            raise ValueError(f"Task {info.field_name} must be a non-empty string")
        return value

    @field_validator("locality", "area", "details", "requirements", mode="before")
    @classmethod
    def clean_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("region", mode="before")
    @classmethod
    def default_region(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return "Unknown"
        return str(value).strip()

    @field_validator("community_completion_percent", mode="before")
    @classmethod
    def clamp_percent(cls, value: Any) -> float:
        try:
            percent = float(value)
        except (TypeError, ValueError):
            log.debug(f"Could not parse completion percent: {value!r}")
            return 0.0
        return min(max(percent, 0.0), 100.0)

    @computed_field
    @property
    def tier(self) -> TaskTier:
        return compute_tier(self.points)

    def with_completion(self, completed: bool) -> Task:
        """Return a copy carrying ``completed``; the original is left untouched."""
        return self.model_copy(update={"completed": completed})

    def __repr__(self) -> str:
        status = "[x]" if self.completed else "[ ]"
        return f"Task(id={self.id!r}, {status} {self.description[:30]!r}, {self.points}pts, {self.region}/{self.area})"


# SECTION: TASK LIST


# KLASS: TaskList
class TaskList(BaseModel):
    """Ordered collection of tasks with lookup, filtering and sorting."""

    model_config = ConfigDict(extra="ignore")

    tasks: list[Task] = Field(default_factory=list)

    @classmethod
    def of(cls, tasks: Iterable[Task]) -> TaskList:
        return cls(tasks=list(tasks))

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:  # type: ignore[override]
        return iter(self.tasks)

    def __getitem__(self, index: int) -> Task:
        return self.tasks[index]

    def get_by_id(self, task_id: str) -> Task | None:
        return next((task for task in self.tasks if task.id == task_id), None)

    @property
    def completed_ids(self) -> list[str]:
        return [task.id for task in self.tasks if task.completed]

    def filter(self, criteria_func: Callable[[Task], bool]) -> TaskList:
        return TaskList(tasks=[task for task in self.tasks if criteria_func(task)])

    def filter_by(
        self,
        *,
        locality: str = "",
        region: str = "",
        area: str = "",
        tier: TaskTier | str = "",
        skill: str = "",
        search: str = "",
        hide_completed: bool = False,
    ) -> TaskList:
        """Apply every non-empty criterion; empty strings mean "any".

        ``skill`` matches case-insensitively inside the requirements text and
        ``search`` inside description, details and requirements.
        """
        wanted_tier = TaskTier(tier) if tier else None
        skill_lower = skill.lower()
        query = search.lower()

        def matches(task: Task) -> bool:
            if locality and task.locality != locality:
                return False
            if region and task.region != region:
                return False
            if area and task.area != area:
                return False
            if wanted_tier and compute_tier(task.points) != wanted_tier:
                return False
            if skill_lower and skill_lower not in task.requirements.lower():
                return False
            if query:
                haystack = f"{task.description} {task.details} {task.requirements}".lower()
                if query not in haystack:
                    return False
            if hide_completed and task.completed:
                return False
            return True

        return self.filter(matches)

    def sorted_by(self, column: str = "points", descending: bool = True) -> TaskList:
        """Sort by a task field, or by tier rank when ``column`` is ``"tier"``."""
        if column == "tier":

            def key(task: Task) -> Any:
                return TIER_ORDER[compute_tier(task.points)]

        elif column in Task.model_fields:

            def key(task: Task) -> Any:
                value = getattr(task, column)
                return value.casefold() if isinstance(value, str) else value

        else:
            raise ValueError(f"Cannot sort tasks by unknown column '{column}'")
        return TaskList(tasks=sorted(self.tasks, key=key, reverse=descending))

    def __repr__(self) -> str:
        return f"TaskList(count={len(self.tasks)}, completed={len(self.completed_ids)})"

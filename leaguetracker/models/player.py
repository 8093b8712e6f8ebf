# leaguetracker/models/player.py

# SECTION: MODULE DOCSTRING
"""A player's view of the task catalog, tagged with where its completion data came from."""

# SECTION: IMPORTS
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .task import Task


# ENUM: ApiStatus
class ApiStatus(str, Enum):
    """Which data path produced a resolved player view."""

    SUCCESS = "success"  # completions from the live API (or a cached live result)
    FALLBACK = "fallback"  # completions from the local store
    ERROR = "error"  # catalog could not be fetched, no completions applied


# KLASS: PlayerProgress
class PlayerProgress(BaseModel):
    model_config = ConfigDict(extra="ignore")

    player_name: str
    tasks: list[Task] = Field(default_factory=list)
    api_status: ApiStatus
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @computed_field
    @property
    def completed_task_ids(self) -> list[str]:
        return [task.id for task in self.tasks if task.completed]

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

    @property
    def earned_points(self) -> int:
        return sum(task.points for task in self.tasks if task.completed)

    def __repr__(self) -> str:
        return (
            f"PlayerProgress(player={self.player_name!r}, status={self.api_status.value}, "
            f"completed={self.completed_count}/{len(self.tasks)})"
        )

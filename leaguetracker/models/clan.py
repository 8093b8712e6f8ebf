# leaguetracker/models/clan.py

# ─── Title ────────────────────────────────────────────────────────────────────
#            Clan Roster & League Progress Models
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Pydantic models for a clan roster, per-member league progress, the clan-wide
roll-up delivered (incrementally) by the clan service, and the state published
by the background refresher.
"""

# SECTION: IMPORTS
from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from .task import Task


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# SECTION: ROSTER


# KLASS: ClanMember
class ClanMember(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    rank: str
    experience: int = 0
    kills: int = 0


# KLASS: ClanInfo
class ClanInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    members: list[ClanMember] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)

    @property
    def total_members(self) -> int:
        return len(self.members)


# SECTION: LEAGUE PROGRESS


# KLASS: MemberProgress
class MemberProgress(BaseModel):
    """League totals for one clan member; ``loading`` until that member is resolved."""

    model_config = ConfigDict(extra="ignore")

    name: str
    rank: str
    total_tasks: int = 0
    completed_tasks: int = 0
    total_points: int = 0
    earned_points: int = 0
    completion_rate: float = 0.0
    loading: bool = True
    error: str | None = None

    @classmethod
    def pending(cls, member: ClanMember) -> MemberProgress:
        return cls(name=member.name, rank=member.rank)

    @classmethod
    def from_tasks(cls, member: MemberProgress | ClanMember, tasks: Iterable[Task]) -> MemberProgress:
        tasks = list(tasks)
        done = [task for task in tasks if task.completed]
        total = len(tasks)
        return cls(
            name=member.name,
            rank=member.rank,
            total_tasks=total,
            completed_tasks=len(done),
            total_points=sum(task.points for task in tasks),
            earned_points=sum(task.points for task in done),
            completion_rate=(len(done) / total) * 100 if total > 0 else 0.0,
            loading=False,
        )

    @classmethod
    def failed(cls, member: MemberProgress | ClanMember, error: str) -> MemberProgress:
        return cls(name=member.name, rank=member.rank, loading=False, error=error or "Failed to fetch data")


# KLASS: ClanProgress
class ClanProgress(BaseModel):
    """Clan-wide league roll-up. Progress snapshots and the final result share this type."""

    model_config = ConfigDict(extra="ignore")

    name: str
    members: list[MemberProgress] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=_utcnow)
    total_clan_points: int = 0
    average_completion_rate: float = 0.0

    @property
    def total_members(self) -> int:
        return len(self.members)

    @property
    def is_complete(self) -> bool:
        return not any(member.loading for member in self.members)

    @classmethod
    def from_members(cls, name: str, members: Iterable[MemberProgress]) -> ClanProgress:
        """Build a roll-up over ``members``, copying them so later edits do not leak in."""
        copies = [member.model_copy() for member in members]
        total_points = sum(member.earned_points for member in copies)
        average = sum(member.completion_rate for member in copies) / len(copies) if copies else 0.0
        return cls(
            name=name,
            members=copies,
            last_updated=_utcnow(),
            total_clan_points=total_points,
            average_completion_rate=average,
        )

    def leaderboard(self) -> list[MemberProgress]:
        """Members ordered by earned points, highest first (ties keep roster order)."""
        return sorted(self.members, key=lambda member: member.earned_points, reverse=True)


# SECTION: BACKGROUND STATE


# KLASS: BackgroundUpdateState
class BackgroundUpdateState(BaseModel):
    model_config = ConfigDict(extra="ignore")

    is_running: bool = False
    last_update: datetime | None = None
    next_update: datetime | None = None
    current_clan: str | None = None
    update_interval: float = 600.0

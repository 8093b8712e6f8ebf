# leaguetracker/models/__init__.py

# SECTION: MODULE DOCSTRING
"""Exports the Pydantic models used across LeagueTracker."""

# SECTION: EXPORTS

# --- Clan ---
from .clan import BackgroundUpdateState, ClanInfo, ClanMember, ClanProgress, MemberProgress

# --- Player ---
from .player import ApiStatus, PlayerProgress

# --- Task ---
from .task import TIER_ORDER, Task, TaskList, TaskTier, compute_tier

__all__ = [
    "Task",
    "TaskList",
    "TaskTier",
    "TIER_ORDER",
    "compute_tier",
    "ApiStatus",
    "PlayerProgress",
    "ClanMember",
    "ClanInfo",
    "MemberProgress",
    "ClanProgress",
    "BackgroundUpdateState",
]

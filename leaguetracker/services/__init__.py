# leaguetracker/services/__init__.py

"""Resolution, aggregation and scheduling services built on the league client."""

from .background import ClanBackgroundService
from .cache import TaskCache, TTLCache
from .clan_service import ClanService
from .local_store import LocalStore
from .player_service import PlayerService
from .stats import TaskStats, compute_stats

__all__ = [
    "TTLCache",
    "TaskCache",
    "LocalStore",
    "PlayerService",
    "ClanService",
    "ClanBackgroundService",
    "TaskStats",
    "compute_stats",
]

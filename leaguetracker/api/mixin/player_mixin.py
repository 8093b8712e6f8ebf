# leaguetracker/api/mixin/player_mixin.py

# SECTION: MODULE DOCSTRING
"""Mixin class providing the WikiSync player completion lookup."""

# SECTION: IMPORTS
from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from leaguetracker.api.exception import FormatError
from leaguetracker.helpers._logger import log

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from leaguetracker.config import LeagueConfig

COMPLETED_TASKS_FIELD = "league_tasks"

# SECTION: MIXIN CLASS


# KLASS: PlayerMixin
class PlayerMixin:
    """Mixin for the per-player completion endpoint."""

    if TYPE_CHECKING:
        config: LeagueConfig
        fetch_json: Callable[..., Coroutine[Any, Any, Any]]

    # FUNC: player_url
    def player_url(self, player_name: str) -> str:
        base = self.config.wikisync_base_url.rstrip("/")
        return f"{base}/{quote(player_name, safe='')}/{self.config.league_id}"

    # FUNC: fetch_completed_task_ids
    async def fetch_completed_task_ids(self, player_name: str) -> list[int]:
        """Fetches the ids of the tasks a player has completed.

        Args:
            player_name: The player's display name.

        Returns:
            Completed task ids as integers.

        Raises:
            ValueError: If player_name is empty.
            NetworkError: If the endpoint cannot be reached or answers non-2xx.
            FormatError: If the body is not JSON or lacks the completed-task list.
        """
        if not player_name or not player_name.strip():
            raise ValueError("player_name cannot be empty.")

        url = self.player_url(player_name.strip())
        data = await self.fetch_json(url)

        raw_ids = data.get(COMPLETED_TASKS_FIELD) if isinstance(data, dict) else None
        if not isinstance(raw_ids, list):
            raise FormatError(
                f"Response has no '{COMPLETED_TASKS_FIELD}' list",
                url=url,
                response_data=type(data).__name__,
            )

        task_ids: list[int] = []
        for raw_id in raw_ids:
            if isinstance(raw_id, bool):
                continue
            if isinstance(raw_id, int):
                task_ids.append(raw_id)
            elif isinstance(raw_id, str) and raw_id.strip().isdigit():
                task_ids.append(int(raw_id))
            else:
                log.debug(f"Ignoring non-integer task id {raw_id!r} for {player_name}")
        return task_ids

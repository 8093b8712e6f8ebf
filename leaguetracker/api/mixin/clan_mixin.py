# leaguetracker/api/mixin/clan_mixin.py

# SECTION: MODULE DOCSTRING
"""Mixin class providing the clan roster endpoint."""

# SECTION: IMPORTS
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from leaguetracker.config import LeagueConfig

# SECTION: MIXIN CLASS


# KLASS: ClanMixin
class ClanMixin:
    """Mixin for the clan hiscores roster."""

    if TYPE_CHECKING:
        config: LeagueConfig
        fetch_text: Callable[..., Coroutine[Any, Any, str]]

    # FUNC: fetch_clan_roster_csv
    async def fetch_clan_roster_csv(self, clan_name: str) -> str:
        """Fetches the member list of a clan as CSV text.

        Raises:
            ValueError: If clan_name is empty.
        """
        if not clan_name or not clan_name.strip():
            raise ValueError("clan_name cannot be empty.")
        return await self.fetch_text(self.config.clan_members_url, params={"clanName": clan_name.strip()})

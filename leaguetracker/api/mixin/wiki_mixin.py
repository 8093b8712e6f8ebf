# leaguetracker/api/mixin/wiki_mixin.py

# SECTION: MODULE DOCSTRING
"""Mixin class providing access to the wiki task page."""

# SECTION: IMPORTS
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Coroutine

    from leaguetracker.config import LeagueConfig

# SECTION: MIXIN CLASS


# KLASS: WikiMixin
class WikiMixin:
    """Mixin for fetching the task definition document."""

    if TYPE_CHECKING:
        config: LeagueConfig
        fetch_text: Callable[..., Coroutine[Any, Any, str]]

    # FUNC: fetch_task_page
    async def fetch_task_page(self) -> str:
        """Fetches the raw HTML of the league task page."""
        return await self.fetch_text(self.config.wiki_tasks_url)

# leaguetracker/services/player_service.py

# ─── Title ────────────────────────────────────────────────────────────────────
#          Player Progress Resolver
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Merges the task catalog with a player's completed tasks.

Resolution is a strict fallback chain:

1. a valid cached overlay for the player is returned as is;
2. the catalog is refetched (never served from cache here, so task
   definitions are as fresh as the completion data laid over them);
3. completed ids come from the WikiSync API -> provenance ``success``;
4. if that call fails, from the local store -> provenance ``fallback``;
5. if the catalog itself cannot be fetched, the last catalog this service saw
   is returned without completions -> provenance ``error``.

This is the only layer allowed to degrade instead of raising.
"""

# SECTION: IMPORTS
from __future__ import annotations

import json
from typing import TYPE_CHECKING

from leaguetracker.api.exception import LeagueAPIError
from leaguetracker.config import LAST_PLAYER_KEY, PLAYER_COMPLETIONS_KEY
from leaguetracker.helpers._logger import log
from leaguetracker.models.player import ApiStatus, PlayerProgress
from leaguetracker.models.task import Task
from leaguetracker.parsers.wiki_parser import parse_tasks, parse_total_task_count

from .cache import TaskCache
from .local_store import LocalStore

if TYPE_CHECKING:
    from leaguetracker.api.client import LeagueClient


def _as_int(task_id: str) -> int | None:
    return int(task_id) if task_id.isdigit() else None


# KLASS: PlayerService
class PlayerService:
    """Resolves per-player task progress and manages locally tracked completions."""

    def __init__(
        self,
        api_client: LeagueClient,
        cache: TaskCache | None = None,
        store: LocalStore | None = None,
    ):
        """Initializes the PlayerService.

        Args:
            api_client: Shared league client (its rate limiter covers every call made here).
            cache: Catalog/overlay cache; built from the client's config when omitted.
            store: Local key-value store; defaults to one under the configured data dir.
        """
        self.api = api_client
        self.config = api_client.config
        self.cache = cache or TaskCache(catalog_ttl=self.config.catalog_ttl, player_ttl=self.config.player_ttl)
        self.store = store or LocalStore(self.config.data_dir)

        self._last_catalog: list[Task] = []
        self._total_task_count: int | None = None
        self._provenance: dict[str, ApiStatus] = {}
        log.debug("PlayerService initialized.")

    # --- Catalog ---

    async def get_catalog(self, force_refresh: bool = False) -> list[Task]:
        """Return the task catalog, fetching and parsing the wiki page on a cache miss.

        Raises:
            NetworkError / FormatError / ParseError: When the page cannot be fetched or parsed.
        """
        if not force_refresh:
            cached = self.cache.get_catalog()
            if cached is not None:
                log.debug("Using cached task catalog.")
                return cached

        log.info(f"{'Forcing refresh of' if force_refresh else 'Fetching'} task catalog from wiki...")
        html = await self.api.fetch_task_page()
        tasks = parse_tasks(html)

        total = parse_total_task_count(html)
        if total:
            self._total_task_count = total

        self.cache.set_catalog(tasks)
        self._last_catalog = tasks
        return tasks

    async def get_total_task_count(self) -> int:
        """Authoritative number of league tasks, from the page's tier summary.

        Falls back to the configured default when the page is unavailable or
        carries no summary row.
        """
        if self._total_task_count is None:
            try:
                await self.get_catalog()
            except LeagueAPIError as e:
                log.warning(f"Could not read total task count, using default: {e}")
        return self._total_task_count or self.config.default_total_tasks

    @property
    def last_fetch_time(self):
        return self.cache.catalog_fetched_at

    # --- Resolution ---

    async def resolve_player(self, player_name: str) -> PlayerProgress:
        """Resolve a player's view of the catalog. Never raises for fetch failures.

        Raises:
            ValueError: If player_name is empty.
        """
        name = player_name.strip() if player_name else ""
        if not name:
            raise ValueError("player_name cannot be empty.")

        cached = self.cache.get_player_overlay(name)
        if cached is not None:
            log.debug(f"Using cached overlay for {name}")
            return PlayerProgress(player_name=name, tasks=cached, api_status=self._provenance.get(name, ApiStatus.SUCCESS))

        self.cache.invalidate_catalog()
        try:
            catalog = await self.get_catalog(force_refresh=True)
        except LeagueAPIError as e:
            log.error(f"Task catalog unavailable while resolving {name}: {e}")
            return PlayerProgress(player_name=name, tasks=list(self._last_catalog), api_status=ApiStatus.ERROR)

        try:
            completed_ids = set(await self.api.fetch_completed_task_ids(name))
        except LeagueAPIError as e:
            log.warning(f"Completion lookup failed for {name} ({e}); falling back to local tracking.")
            saved_ids = self.load_completions(name)
            tasks = [task.with_completion(task.id in saved_ids) for task in catalog]
            status = ApiStatus.FALLBACK
        else:
            tasks = [task.with_completion(_as_int(task.id) in completed_ids) for task in catalog]
            status = ApiStatus.SUCCESS

        self.cache.set_player_overlay(name, tasks)
        self._provenance[name] = status

        progress = PlayerProgress(player_name=name, tasks=tasks, api_status=status)
        log.info(f"Player {name}: {progress.completed_count}/{len(tasks)} tasks completed ({status.value}).")
        return progress

    async def refresh(self, player_name: str | None = None) -> PlayerProgress:
        """Drop every cached catalog and overlay, then resolve the player again.

        Without a name the remembered last player is refreshed.

        Raises:
            ValueError: If no name is given and none is remembered.
        """
        name = player_name or self.last_player()
        if not name:
            raise ValueError("No player to refresh.")
        self.clear_caches()
        return await self.resolve_player(name)

    def clear_caches(self) -> None:
        self.cache.invalidate_catalog()
        self.cache.invalidate_player()
        self._provenance.clear()

    # --- Local completion tracking ---

    def load_completions(self, player_name: str) -> set[str]:
        """Completed task ids saved locally for a player; empty when absent or unreadable."""
        raw = self.store.get_item(PLAYER_COMPLETIONS_KEY.format(player=player_name))
        if raw is None:
            return set()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            log.warning(f"Saved completions for {player_name} are not valid JSON; starting fresh.")
            return set()
        if not isinstance(data, list):
            log.warning(f"Saved completions for {player_name} are not a list; starting fresh.")
            return set()
        return {str(task_id) for task_id in data}

    def save_completions(self, player_name: str, tasks: list[Task]) -> bool:
        completed_ids = [task.id for task in tasks if task.completed]
        saved = self.store.set_item(PLAYER_COMPLETIONS_KEY.format(player=player_name), json.dumps(completed_ids))
        if saved:
            log.debug(f"Saved {len(completed_ids)} completed tasks for {player_name}")
        return saved

    def toggle_completion(self, progress: PlayerProgress, task_id: str) -> PlayerProgress:
        """Flip one task's completed flag, persist the player's list and update the overlay.

        Raises:
            KeyError: If no task in ``progress`` has ``task_id``.
        """
        if not any(task.id == task_id for task in progress.tasks):
            raise KeyError(f"Unknown task id '{task_id}' for {progress.player_name}")

        tasks = [task.with_completion(not task.completed) if task.id == task_id else task for task in progress.tasks]
        self.save_completions(progress.player_name, tasks)
        self.cache.set_player_overlay(progress.player_name, tasks)
        self._provenance.setdefault(progress.player_name, progress.api_status)
        return progress.model_copy(update={"tasks": tasks})

    # --- Last viewed player ---

    def remember_player(self, player_name: str) -> None:
        self.store.set_item(LAST_PLAYER_KEY, player_name)

    def last_player(self) -> str | None:
        return self.store.get_item(LAST_PLAYER_KEY) or None

    def forget_player(self) -> None:
        self.store.remove_item(LAST_PLAYER_KEY)
        self.cache.invalidate_player()
        self._provenance.clear()

    async def resolve_last_player(self) -> PlayerProgress | None:
        """Resolve the remembered player, if any."""
        name = self.last_player()
        if name is None:
            return None
        return await self.resolve_player(name)

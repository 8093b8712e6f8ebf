# leaguetracker/services/clan_service.py

# ─── Title ────────────────────────────────────────────────────────────────────
#          Clan League Progress Aggregator
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Resolves league progress for every member of a clan.

Members are resolved in fixed-size batches: batches run one after another
(with a pause in between), members inside a batch run concurrently. After each
batch a fresh ``ClanProgress`` snapshot is handed to the caller, so a UI can
render partial results while the rest of the roster is still loading.
"""

# SECTION: IMPORTS
from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TYPE_CHECKING, Any, Union

from leaguetracker.api.exception import NotFoundError
from leaguetracker.helpers._logger import log
from leaguetracker.models.clan import ClanInfo, ClanMember, ClanProgress, MemberProgress
from leaguetracker.models.player import ApiStatus
from leaguetracker.parsers.roster_parser import parse_clan_csv

from .cache import Clock, TTLCache

if TYPE_CHECKING:
    from leaguetracker.api.client import LeagueClient

    from .player_service import PlayerService

# SECTION: TYPES
ProgressCallback = Callable[[ClanProgress], Union[None, Awaitable[None]]]

CATALOG_UNAVAILABLE = "Task catalog unavailable"


# KLASS: ClanService
class ClanService:
    """Fetches clan rosters and aggregates member league progress."""

    def __init__(
        self,
        api_client: LeagueClient,
        player_service: PlayerService,
        batch_size: int | None = None,
        batch_delay: float | None = None,
        roster_ttl: float | None = None,
        progress_ttl: float | None = None,
        player_clans: dict[str, str] | None = None,
        clock: Clock = time.monotonic,
    ):
        """Initializes the ClanService.

        Args:
            api_client: Shared league client.
            player_service: Resolver used for each member; shares the client's rate limiter.
            batch_size: Members resolved concurrently per batch.
            batch_delay: Seconds slept between batches.
            roster_ttl: Lifetime of a cached roster, in seconds.
            progress_ttl: Lifetime of a cached aggregate, in seconds.
            player_clans: Static player -> clan lookup.
            clock: Monotonic clock for the caches.

        Unset values come from the client's config.
        """
        config = api_client.config
        self.api = api_client
        self.player_service = player_service
        self.batch_size = max(1, batch_size if batch_size is not None else config.batch_size)
        self.batch_delay = batch_delay if batch_delay is not None else config.batch_delay
        self.player_clans = dict(player_clans if player_clans is not None else config.player_clans)

        self._rosters: TTLCache[str, ClanInfo] = TTLCache(
            roster_ttl if roster_ttl is not None else config.roster_ttl, name="roster", clock=clock
        )
        self._progress: TTLCache[str, ClanProgress] = TTLCache(
            progress_ttl if progress_ttl is not None else config.clan_progress_ttl, name="clan-progress", clock=clock
        )
        log.debug(f"ClanService initialized (batch size {self.batch_size}, delay {self.batch_delay}s).")

    # --- Roster ---

    async def get_clan_members(self, clan_name: str) -> ClanInfo:
        """Return the clan roster, read through a 30 minute cache.

        Raises:
            NetworkError / FormatError: When the roster cannot be fetched.
            NotFoundError: When the clan has no parseable members.
        """
        cached = self._rosters.get(clan_name)
        if cached is not None:
            log.debug(f"Using cached roster for {clan_name}")
            return cached

        text = await self.api.fetch_clan_roster_csv(clan_name)
        members = parse_clan_csv(text)
        if not members:
            raise NotFoundError(f"Clan '{clan_name}' not found or has no members")

        info = ClanInfo(name=clan_name, members=members)
        self._rosters.set(clan_name, info)
        log.info(f"Fetched {info.total_members} members for clan {clan_name}")
        return info

    def get_clan_for_player(self, player_name: str) -> str:
        """Clan of a known player.

        Raises:
            NotFoundError: If the player has no known clan.
        """
        clan = self.player_clans.get(player_name)
        if clan is None:
            raise NotFoundError(f"No known clan for player '{player_name}'")
        return clan

    # --- Aggregation ---

    async def _resolve_member(self, member: ClanMember | MemberProgress) -> MemberProgress:
        try:
            progress = await self.player_service.resolve_player(member.name)
        except Exception as e:
            log.warning(f"Failed to resolve clan member {member.name}: {e}")
            return MemberProgress.failed(member, str(e))

        if progress.api_status is ApiStatus.ERROR:
            return MemberProgress.failed(member, CATALOG_UNAVAILABLE)
        return MemberProgress.from_tasks(member, progress.tasks)

    async def _aggregate(self, clan_name: str) -> AsyncIterator[ClanProgress]:
        info = await self.get_clan_members(clan_name)
        members = [MemberProgress.pending(member) for member in info.members]
        batches = [range(start, min(start + self.batch_size, len(members))) for start in range(0, len(members), self.batch_size)]
        log.info(f"Resolving {len(members)} members of {clan_name} in {len(batches)} batches")

        for batch_number, slots in enumerate(batches, start=1):
            results = await asyncio.gather(*(self._resolve_member(members[slot]) for slot in slots))
            for slot, result in zip(slots, results):
                members[slot] = result

            snapshot = ClanProgress.from_members(clan_name, members)
            log.debug(f"{clan_name}: batch {batch_number}/{len(batches)} done")
            if batch_number == len(batches):
                self._progress.set(clan_name, snapshot)
            yield snapshot

            if batch_number < len(batches) and self.batch_delay > 0:
                await asyncio.sleep(self.batch_delay)

    async def iter_clan_progress(self, clan_name: str, force_refresh: bool = False) -> AsyncIterator[ClanProgress]:
        """Yield a snapshot after every batch; the last one is the final result.

        A valid cached result is yielded on its own unless ``force_refresh``.
        """
        if not force_refresh:
            cached = self._progress.get(clan_name)
            if cached is not None:
                log.debug(f"Using cached clan progress for {clan_name}")
                yield cached
                return

        async for snapshot in self._aggregate(clan_name):
            yield snapshot

    async def resolve_clan(
        self,
        clan_name: str,
        force_refresh: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> ClanProgress:
        """Aggregate progress for a whole clan.

        ``on_progress`` (plain function or coroutine function) gets an
        independent copy of each batch snapshot. It is not called for cache hits.

        Raises:
            NetworkError / FormatError / NotFoundError: When the roster cannot be obtained.
        """
        if not force_refresh:
            cached = self._progress.get(clan_name)
            if cached is not None:
                log.debug(f"Using cached clan progress for {clan_name}")
                return cached

        final: ClanProgress | None = None
        async for snapshot in self._aggregate(clan_name):
            final = snapshot
            if on_progress is not None:
                await self._emit(on_progress, snapshot.model_copy(deep=True))

        if final is None:
            raise NotFoundError(f"Clan '{clan_name}' has no members")
        log.success(
            f"Clan {clan_name}: {final.total_members} members, {final.total_clan_points} points, "
            f"{final.average_completion_rate:.1f}% average completion"
        )
        return final

    @staticmethod
    async def _emit(callback: ProgressCallback, snapshot: ClanProgress) -> None:
        try:
            result = callback(snapshot)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log.error(f"Clan progress callback failed: {e}")

    # --- Cache management ---

    def clear_cache(self, clan_name: str | None = None) -> None:
        """Drop cached rosters and aggregates for one clan, or for all clans."""
        self._rosters.invalidate(clan_name)
        self._progress.invalidate(clan_name)

    def clear_progress_cache(self, clan_name: str | None = None) -> None:
        self._progress.invalidate(clan_name)

    def has_valid_cached_progress(self, clan_name: str) -> bool:
        return self._progress.is_valid(clan_name)

    def get_cached_progress(self, clan_name: str) -> ClanProgress | None:
        """Last aggregate for the clan, even if expired."""
        return self._progress.peek(clan_name)

    def cache_status(self) -> dict[str, Any]:
        return {
            "rosters": len(self._rosters),
            "progress": len(self._progress),
            "roster_ttl": self._rosters.ttl,
            "progress_ttl": self._progress.ttl,
        }

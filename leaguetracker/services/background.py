# leaguetracker/services/background.py

# ─── Title ────────────────────────────────────────────────────────────────────
#          Background Clan Refresh Scheduler
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Periodically re-aggregates one clan's progress and tells listeners about it.

One timer task per schedule fires a forced refresh every ``update_interval``
seconds. Each refresh runs as its own task, so ``stop()`` only prevents new
cycles; a refresh already in flight is left to finish.
"""

# SECTION: IMPORTS
from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from leaguetracker.config import BACKGROUND_UPDATE_INTERVAL
from leaguetracker.helpers._logger import log
from leaguetracker.models.clan import BackgroundUpdateState

from .clan_service import ClanService

StateListener = Callable[[BackgroundUpdateState], None]


# KLASS: ClanBackgroundService
class ClanBackgroundService:
    """Timer-driven refresher for a single clan's aggregate."""

    def __init__(self, clan_service: ClanService, update_interval: float | None = None):
        self.clan_service = clan_service
        interval = update_interval if update_interval is not None else BACKGROUND_UPDATE_INTERVAL
        self._state = BackgroundUpdateState(update_interval=interval)
        self._listeners: list[StateListener] = []
        self._timer: asyncio.Task | None = None
        self._cycles: set[asyncio.Task] = set()

    # --- Listeners ---

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for state changes. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        state = self.get_state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                log.error(f"Background state listener failed: {e}")

    def get_state(self) -> BackgroundUpdateState:
        return self._state.model_copy()

    # --- Schedule ---

    def start(self, clan_name: str) -> None:
        """Begin refreshing ``clan_name``, replacing any current schedule.

        Must be called from a running event loop.
        """
        loop = asyncio.get_running_loop()
        self.stop()

        self._state = self._state.model_copy(update={"is_running": True, "current_clan": clan_name})
        log.info(f"Starting background updates for {clan_name} every {self._state.update_interval}s")
        self._notify()

        self._spawn_cycle(clan_name)
        self._timer = loop.create_task(self._run_timer(clan_name))

    def stop(self) -> None:
        """Cancel the timer and reset state. In-flight refreshes are not cancelled."""
        if self._timer is None and not self._state.is_running:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        log.info("Stopping background updates")
        self._state = BackgroundUpdateState(update_interval=self._state.update_interval)
        self._notify()

    async def force_update(self) -> None:
        """Run one refresh for the current clan now and wait for it."""
        clan_name = self._state.current_clan
        if not self._state.is_running or clan_name is None:
            log.warning("No clan scheduled; force update skipped")
            return
        await self._perform_update(clan_name)

    def set_update_interval(self, seconds: float) -> None:
        """Change the interval; a running schedule is restarted with it.

        Raises:
            ValueError: If ``seconds`` is not positive.
        """
        if seconds <= 0:
            raise ValueError("update interval must be positive")

        self._state = self._state.model_copy(update={"update_interval": float(seconds)})
        if self._state.is_running and self._state.current_clan:
            self.start(self._state.current_clan)
        else:
            self._notify()

    async def aclose(self) -> None:
        """Stop the schedule and wait for any in-flight refresh."""
        self.stop()
        if self._cycles:
            await asyncio.gather(*self._cycles, return_exceptions=True)

    # --- Internals ---

    async def _run_timer(self, clan_name: str) -> None:
        while True:
            await asyncio.sleep(self._state.update_interval)
            self._spawn_cycle(clan_name)

    def _spawn_cycle(self, clan_name: str) -> None:
        task = asyncio.get_running_loop().create_task(self._perform_update(clan_name))
        self._cycles.add(task)
        task.add_done_callback(self._cycles.discard)

    def _is_current(self, clan_name: str) -> bool:
        return self._state.is_running and self._state.current_clan == clan_name

    async def _perform_update(self, clan_name: str) -> None:
        if self._is_current(clan_name):
            next_update = datetime.now(timezone.utc) + timedelta(seconds=self._state.update_interval)
            self._state = self._state.model_copy(update={"next_update": next_update})
            self._notify()

        try:
            await self.clan_service.resolve_clan(clan_name, force_refresh=True)
        except Exception as e:
            log.error(f"Background update for {clan_name} failed: {e}")
        else:
            log.debug(f"Background update for {clan_name} finished")

        if self._is_current(clan_name):
            self._state = self._state.model_copy(update={"last_update": datetime.now(timezone.utc)})
            self._notify()

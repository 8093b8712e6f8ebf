"""Clan aggregation: batching, progress snapshots, failure isolation and caching."""

import asyncio
import time

import httpx
import pytest

from leaguetracker.api.exception import NetworkError, NotFoundError
from leaguetracker.models.clan import ClanProgress
from leaguetracker.services.clan_service import ClanService
from leaguetracker.services.player_service import PlayerService

SEVEN_MEMBER_ROSTER = "\n".join(
    f"{name},{rank},100,0"
    for name, rank in [
        ("Alice", "Owner"),
        ("Bob", "Deputy Owner"),
        ("Carol", "Overseer"),
        ("Dave", "Coordinator"),
        ("Eve", "Organiser"),
        ("Frank", "Admin"),
        ("Gina", "Recruit"),
    ]
)
ROSTER_ORDER = ["Alice", "Bob", "Carol", "Dave", "Eve", "Frank", "Gina"]


class FlakyPlayerService(PlayerService):
    """Raises for one member so aggregation has to isolate the failure."""

    async def resolve_player(self, player_name):
        if player_name == "Dave":
            raise RuntimeError("boom")
        return await super().resolve_player(player_name)


@pytest.fixture
def seven_member_clan(fake_league):
    fake_league.roster_csv = SEVEN_MEMBER_ROSTER
    fake_league.completions.update(
        {
            "Alice": [1],
            "Bob": [1, 2],
            "Carol": [],
            "Eve": [4],
            "Frank": 500,
            "Gina": [1, 2, 4],
        }
    )
    return fake_league


@pytest.fixture
def clans(client, store) -> ClanService:
    return ClanService(client, FlakyPlayerService(client, store=store), batch_size=3, batch_delay=0)


@pytest.mark.asyncio
async def test_seven_members_give_three_snapshots_and_correct_totals(clans, seven_member_clan):
    snapshots: list[ClanProgress] = []

    result = await clans.resolve_clan("Iron Haze", on_progress=snapshots.append)

    assert len(snapshots) == 3
    assert [sum(not m.loading for m in snap.members) for snap in snapshots] == [3, 6, 7]
    assert not snapshots[0].is_complete
    assert snapshots[-1].is_complete

    assert [member.name for member in result.members] == ROSTER_ORDER
    assert result.total_members == 7
    assert result.total_clan_points == 30 + 40 + 250 + 290
    assert result.average_completion_rate == pytest.approx((25 + 50 + 0 + 0 + 25 + 0 + 75) / 7)


@pytest.mark.asyncio
async def test_failed_member_contributes_nothing(clans, seven_member_clan):
    result = await clans.resolve_clan("Iron Haze")
    dave = next(member for member in result.members if member.name == "Dave")

    assert dave.loading is False
    assert dave.error == "boom"
    assert (dave.total_tasks, dave.completed_tasks, dave.earned_points, dave.completion_rate) == (0, 0, 0, 0.0)


@pytest.mark.asyncio
async def test_fallback_member_counts_as_resolved(clans, seven_member_clan):
    result = await clans.resolve_clan("Iron Haze")
    frank = next(member for member in result.members if member.name == "Frank")

    assert frank.error is None
    assert (frank.total_tasks, frank.completed_tasks) == (4, 0)


@pytest.mark.asyncio
async def test_snapshots_are_independent_copies(clans, seven_member_clan):
    snapshots: list[ClanProgress] = []

    result = await clans.resolve_clan("Iron Haze", on_progress=snapshots.append)
    snapshots[-1].members[0].earned_points = 9999

    assert result.members[0].earned_points == 30
    assert snapshots[0].members[0].name == "Alice"


@pytest.mark.asyncio
async def test_async_callback_and_callback_errors(clans, seven_member_clan):
    seen: list[int] = []

    async def on_progress(snapshot):
        seen.append(len(snapshot.members))
        raise ValueError("listener bug")

    result = await clans.resolve_clan("Iron Haze", on_progress=on_progress)

    assert seen == [7, 7, 7]
    assert result.is_complete


@pytest.mark.asyncio
async def test_cached_result_is_returned_without_callbacks(clans, seven_member_clan):
    first = await clans.resolve_clan("Iron Haze")
    requests = len(seven_member_clan.requests)
    snapshots: list[ClanProgress] = []

    second = await clans.resolve_clan("Iron Haze", on_progress=snapshots.append)

    assert second is first
    assert snapshots == []
    assert len(seven_member_clan.requests) == requests
    assert clans.has_valid_cached_progress("Iron Haze")
    assert clans.get_cached_progress("Iron Haze") is first


@pytest.mark.asyncio
async def test_force_refresh_recomputes(clans, seven_member_clan):
    first = await clans.resolve_clan("Iron Haze")
    clans.player_service.clear_caches()
    seven_member_clan.completions["Carol"] = [2]

    second = await clans.resolve_clan("Iron Haze", force_refresh=True)

    assert second is not first
    assert second.total_clan_points == first.total_clan_points + 10


@pytest.mark.asyncio
async def test_iter_clan_progress_ends_with_final(clans, seven_member_clan):
    snapshots = [snapshot async for snapshot in clans.iter_clan_progress("Iron Haze")]

    assert len(snapshots) == 3
    assert snapshots[-1].is_complete
    assert clans.get_cached_progress("Iron Haze") is snapshots[-1]


@pytest.mark.asyncio
async def test_roster_is_cached(clans, fake_league):
    await clans.get_clan_members("Iron Haze")
    info = await clans.get_clan_members("Iron Haze")

    assert [member.name for member in info.members] == ["Alice", "Carol Smith"]
    assert fake_league.roster_requests == 1

    clans.clear_cache("Iron Haze")
    await clans.get_clan_members("Iron Haze")
    assert fake_league.roster_requests == 2


@pytest.mark.asyncio
async def test_empty_roster_is_not_found(clans, fake_league):
    fake_league.roster_csv = ""

    with pytest.raises(NotFoundError):
        await clans.resolve_clan("Nobody")


@pytest.mark.asyncio
async def test_roster_fetch_failure_propagates(clans, fake_league):
    fake_league.roster_status = 503

    with pytest.raises(NetworkError):
        await clans.get_clan_members("Iron Haze")


@pytest.mark.asyncio
async def test_catalog_outage_marks_members_failed(clans, seven_member_clan):
    seven_member_clan.wiki_status = 500

    result = await clans.resolve_clan("Iron Haze")

    assert all(member.error for member in result.members)
    assert result.total_clan_points == 0


def test_clan_for_player(client):
    clans = ClanService(client, PlayerService(client), player_clans={"Xaedankye": "Iron Haze"})

    assert clans.get_clan_for_player("Xaedankye") == "Iron Haze"
    with pytest.raises(NotFoundError):
        clans.get_clan_for_player("Stranger")


@pytest.mark.asyncio
async def test_cache_status_and_clearing(clans, seven_member_clan):
    await clans.resolve_clan("Iron Haze")
    assert clans.cache_status()["progress"] == 1

    clans.clear_progress_cache("Iron Haze")
    assert not clans.has_valid_cached_progress("Iron Haze")
    assert clans.cache_status()["rosters"] == 1


@pytest.mark.asyncio
async def test_batches_run_one_after_another(make_client, seven_member_clan, store):
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        if request.url.host != "sync.runescape.wiki":
            return seven_member_clan(request)
        in_flight += 1
        peak = max(peak, in_flight)
        try:
            await asyncio.sleep(0.01)
            return seven_member_clan(request)
        finally:
            in_flight -= 1

    client = make_client(handler)
    clans = ClanService(client, FlakyPlayerService(client, store=store), batch_size=3, batch_delay=0)

    await clans.resolve_clan("Iron Haze")
    await client.close()

    assert peak <= 3


@pytest.mark.asyncio
async def test_delay_between_batches_but_not_after_last(client, store, seven_member_clan):
    clans = ClanService(client, FlakyPlayerService(client, store=store), batch_size=3, batch_delay=0.2)
    callback_times: list[float] = []

    def on_progress(snapshot):
        callback_times.append(time.monotonic())

    await clans.resolve_clan("Iron Haze", on_progress=on_progress)
    returned_at = time.monotonic()

    assert len(callback_times) == 3
    assert callback_times[1] - callback_times[0] >= 0.19
    assert callback_times[2] - callback_times[1] >= 0.19
    assert returned_at - callback_times[2] < 0.15

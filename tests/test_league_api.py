"""Fetcher behaviour: rate limiting, error mapping and response decoding."""

import asyncio
import time

import httpx
import pytest

from leaguetracker.api.exception import FormatError, NetworkError

URL = "https://example.test/data"


@pytest.mark.asyncio
async def test_requests_are_spaced_by_min_interval(make_client):
    seen: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(time.monotonic())
        return httpx.Response(200, text="ok")

    client = make_client(handler, min_request_interval=0.2)
    start = time.monotonic()
    await asyncio.gather(*(client.fetch_text(URL) for _ in range(3)))
    elapsed = time.monotonic() - start
    await client.close()

    assert len(seen) == 3
    assert elapsed >= 0.39
    assert seen == sorted(seen)


@pytest.mark.asyncio
async def test_failed_request_still_advances_the_clock(make_client):
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500 if calls == 1 else 200, text="x")

    client = make_client(handler, min_request_interval=0.2)
    start = time.monotonic()
    with pytest.raises(NetworkError):
        await client.fetch_text(URL)
    await client.fetch_text(URL)
    elapsed = time.monotonic() - start
    await client.close()

    assert elapsed >= 0.19


@pytest.mark.asyncio
async def test_http_error_becomes_network_error(make_client):
    client = make_client(lambda request: httpx.Response(500, text="server exploded"))

    with pytest.raises(NetworkError) as exc_info:
        await client.fetch_text(URL)
    await client.close()

    assert exc_info.value.status_code == 500
    assert exc_info.value.url == URL
    assert "server exploded" in exc_info.value.response_data


@pytest.mark.asyncio
async def test_timeout_becomes_network_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    client = make_client(handler)
    with pytest.raises(NetworkError) as exc_info:
        await client.fetch_text(URL)
    await client.close()

    assert exc_info.value.status_code == 408


@pytest.mark.asyncio
async def test_connection_failure_becomes_network_error(make_client):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    client = make_client(handler)
    with pytest.raises(NetworkError) as exc_info:
        await client.fetch_text(URL)
    await client.close()

    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_undecodable_body_is_format_error(make_client):
    client = make_client(
        lambda request: httpx.Response(200, content=b"\xff\xfe\xfa", headers={"content-type": "text/html; charset=utf-8"})
    )

    with pytest.raises(FormatError):
        await client.fetch_text(URL)
    await client.close()


@pytest.mark.asyncio
async def test_invalid_json_is_format_error(make_client):
    client = make_client(lambda request: httpx.Response(200, text="{not json"))

    with pytest.raises(FormatError):
        await client.fetch_json(URL)
    await client.close()


@pytest.mark.asyncio
async def test_completed_task_ids(client, fake_league):
    fake_league.completions["Iron Haze"] = [1, "2", "x", True, 4]

    ids = await client.fetch_completed_task_ids("Iron Haze")
    await client.close()

    assert ids == [1, 2, 4]
    assert fake_league.requests[-1].url.path == "/runescape/player/Iron Haze/LEAGUE_1"


@pytest.mark.asyncio
async def test_completed_task_ids_requires_list(make_client):
    client = make_client(lambda request: httpx.Response(200, json={"username": "Alice"}))

    with pytest.raises(FormatError):
        await client.fetch_completed_task_ids("Alice")
    await client.close()


@pytest.mark.asyncio
async def test_completed_task_ids_rejects_empty_name(client):
    with pytest.raises(ValueError):
        await client.fetch_completed_task_ids("  ")


@pytest.mark.asyncio
async def test_roster_request_passes_clan_name(client, fake_league):
    text = await client.fetch_clan_roster_csv("Iron Haze")
    await client.close()

    assert text.startswith("Clanmate")
    assert fake_league.requests[-1].url.params["clanName"] == "Iron Haze"

"""Shared fixtures: a small wiki task page, a roster CSV and a fake league backend.

Every HTTP call goes through ``httpx.MockTransport``; nothing touches the network.
"""

from __future__ import annotations

from typing import Any, Callable
from urllib.parse import unquote

import httpx
import pytest

from leaguetracker.api.client import LeagueClient
from leaguetracker.config import LeagueConfig
from leaguetracker.services.local_store import LocalStore

# ============================================================================
# SAMPLE DOCUMENTS
# ============================================================================

WIKI_HTML = """
<html><body>
<table class="wikitable">
  <tr><th>Tier</th><th>Tasks</th></tr>
  <tr><td>Easy</td><td>300</td></tr>
  <tr><td>Total</td><td>1,234</td></tr>
</table>
<table class="wikitable sortable">
  <tr>
    <th>Locality</th><th>Task</th><th>Information</th>
    <th>Requirements</th><th>Pts</th><th>Comp%</th>
  </tr>
  <tr data-taskid="1">
    <td>Kandarin: Ardougne</td><td>Pickpocket a Knight</td>
    <td>Steal from a Knight of Ardougne</td><td>55 Thieving</td>
    <td>30</td><td>45.2%</td>
  </tr>
  <tr data-taskid="2">
    <td>Global</td><td>Reach total level 500</td><td></td><td></td>
    <td>10</td><td>80%</td>
  </tr>
  <tr>
    <td>Morytania</td><td>Kill a Vampyre</td><td>Any vampyre counts</td><td></td>
    <td>80</td><td>12.5%</td>
  </tr>
  <tr data-taskid="4">
    <td>Asgarnia: Falador</td><td>Master the Party Room</td><td></td><td>99 Agility</td>
    <td>250</td><td>1%</td>
  </tr>
  <tr><td>Broken</td><td>Too few cells</td><td>10</td></tr>
  <tr data-taskid="6">
    <td>Desert</td><td>Worth nothing</td><td></td><td></td><td>0</td><td>5%</td>
  </tr>
</table>
</body></html>
"""

# Ids in WIKI_HTML, in page order. The third row has no explicit id.
TASK_IDS = ["1", "2", "Morytania-General-Kill a Vampyre-3", "4"]
TASK_POINTS = {"1": 30, "2": 10, "Morytania-General-Kill a Vampyre-3": 80, "4": 250}

ROSTER_CSV = "Clanmate, Clan Rank, Total XP, Kills\nAlice,Owner,1000,5\nBob,Admin\nCarol\xa0Smith,Recruit,abc,2\n"


# ============================================================================
# FAKE BACKEND
# ============================================================================


class FakeLeague:
    """Routes requests by host: wiki page, WikiSync player lookups, clan roster.

    ``completions`` maps a player name to a list of completed ids, or to an
    HTTP status the player lookup should fail with. Unknown players get 404.
    """

    def __init__(self, wiki_html: str = WIKI_HTML, roster_csv: str = ROSTER_CSV):
        self.wiki_html = wiki_html
        self.wiki_status = 200
        self.roster_csv = roster_csv
        self.roster_status = 200
        self.completions: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def count(self, host: str) -> int:
        return sum(1 for request in self.requests if request.url.host == host)

    @property
    def wiki_requests(self) -> int:
        return self.count("runescape.wiki")

    @property
    def roster_requests(self) -> int:
        return self.count("secure.runescape.com")

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host

        if host == "runescape.wiki":
            return httpx.Response(self.wiki_status, text=self.wiki_html)

        if host == "sync.runescape.wiki":
            name = unquote(request.url.path.rstrip("/").split("/")[-2])
            result = self.completions.get(name, 404)
            if isinstance(result, int):
                return httpx.Response(result, text="lookup failed")
            return httpx.Response(200, json={"username": name, "league_tasks": result})

        if host == "secure.runescape.com":
            return httpx.Response(self.roster_status, text=self.roster_csv)

        return httpx.Response(404, text="unknown host")


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def config(tmp_path) -> LeagueConfig:
    return LeagueConfig(min_request_interval=0, batch_delay=0, data_dir=tmp_path)


@pytest.fixture
def fake_league() -> FakeLeague:
    return FakeLeague()


@pytest.fixture
def make_client(config) -> Callable[..., LeagueClient]:
    """Factory for a LeagueClient whose transport is the given handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> LeagueClient:
        return LeagueClient(config, transport=httpx.MockTransport(handler), **kwargs)

    return _make


@pytest.fixture
def client(make_client, fake_league) -> LeagueClient:
    return make_client(fake_league)


@pytest.fixture
def store(tmp_path) -> LocalStore:
    return LocalStore(tmp_path)

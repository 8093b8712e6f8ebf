# leaguetracker/config.py

# SECTION: MODULE DOCSTRING
"""Default endpoints, cache lifetimes and pacing, plus the pydantic-settings model
that lets every value be overridden from the environment (``LEAGUE_*``) or a ``.env`` file."""

# SECTION: IMPORTS
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# SECTION: CONSTANTS
WIKI_TASKS_URL = "https://runescape.wiki/w/Catalyst_League/Tasks"
WIKISYNC_BASE_URL = "https://sync.runescape.wiki/runescape/player"
LEAGUE_ID = "LEAGUE_1"
CLAN_MEMBERS_URL = "https://secure.runescape.com/m=clan-hiscores/members_lite.ws"
USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"

LEAGUE_DATA_PATH: Path = Path("./league_cache")
STORE_FILENAME = "store.json"

MIN_REQUEST_INTERVAL: float = 1.0  # seconds between any two outbound requests
REQUEST_TIMEOUT: float = 30.0

CATALOG_CACHE_SECONDS: float = 5 * 60
PLAYER_CACHE_SECONDS: float = 5 * 60
ROSTER_CACHE_SECONDS: float = 30 * 60
CLAN_PROGRESS_CACHE_SECONDS: float = 60 * 60

CLAN_BATCH_SIZE = 3
CLAN_BATCH_DELAY: float = 2.0
BACKGROUND_UPDATE_INTERVAL: float = 10 * 60

DEFAULT_TOTAL_TASKS = 1117

# Player -> clan lookup used before a roster has been fetched
KNOWN_PLAYER_CLANS: dict[str, str] = {"Xaedankye": "Iron Haze"}

# Local store keys
PLAYER_COMPLETIONS_KEY = "catalyst-league-{player}"
LAST_PLAYER_KEY = "catalyst-league-player"


# KLASS: LeagueConfig
class LeagueConfig(BaseSettings):
    """Runtime configuration; every field maps to a ``LEAGUE_<FIELD>`` variable."""

    wiki_tasks_url: str = Field(WIKI_TASKS_URL, description="Wiki page holding the task tables")
    wikisync_base_url: str = Field(WIKISYNC_BASE_URL, description="WikiSync player endpoint base")
    league_id: str = Field(LEAGUE_ID, description="League identifier appended to player lookups")
    clan_members_url: str = Field(CLAN_MEMBERS_URL, description="Clan roster CSV endpoint")
    user_agent: str = Field(USER_AGENT)
    request_timeout: float = Field(REQUEST_TIMEOUT, gt=0)
    min_request_interval: float = Field(MIN_REQUEST_INTERVAL, ge=0)

    catalog_ttl: float = Field(CATALOG_CACHE_SECONDS, ge=0)
    player_ttl: float = Field(PLAYER_CACHE_SECONDS, ge=0)
    roster_ttl: float = Field(ROSTER_CACHE_SECONDS, ge=0)
    clan_progress_ttl: float = Field(CLAN_PROGRESS_CACHE_SECONDS, ge=0)

    batch_size: int = Field(CLAN_BATCH_SIZE, ge=1)
    batch_delay: float = Field(CLAN_BATCH_DELAY, ge=0)
    update_interval: float = Field(BACKGROUND_UPDATE_INTERVAL, gt=0)

    data_dir: Path = Field(LEAGUE_DATA_PATH, description="Where the local store and logs live")
    default_total_tasks: int = Field(DEFAULT_TOTAL_TASKS, ge=0)
    player_clans: dict[str, str] = Field(default_factory=lambda: dict(KNOWN_PLAYER_CLANS))

    model_config = SettingsConfigDict(
        env_prefix="LEAGUE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

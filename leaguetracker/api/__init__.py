# leaguetracker/api/__init__.py

from .client import LeagueClient
from .exception import FormatError, LeagueAPIError, NetworkError, NotFoundError, ParseError
from .league_api import LeagueAPI

__all__ = [
    "LeagueAPI",
    "LeagueClient",
    "LeagueAPIError",
    "NetworkError",
    "FormatError",
    "ParseError",
    "NotFoundError",
]

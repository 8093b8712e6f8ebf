# leaguetracker/helpers/__init__.py

"""LeagueTracker helper utilities.

- Logging setup (_logger.py)
- JSON handling (_json.py)
"""

from ._json import load_json, save_json
from ._logger import get_logger, log, setup_logging

__all__ = [
    # Logging
    "log",
    "get_logger",
    "setup_logging",
    # JSON Handling
    "save_json",
    "load_json",
]

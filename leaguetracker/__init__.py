# leaguetracker/__init__.py
"""LeagueTracker Package Initialization.

Async tools for tracking league task progress for players and whole clans.
"""

# --- Define Package Metadata ---
__version__ = "0.1.0"
__author__ = "vainilie"

# leaguetracker/api/client.py

# SECTION: MODULE DOCSTRING
"""Defines LeagueClient, the fetcher combined with every endpoint mixin."""

# SECTION: IMPORTS
from .league_api import LeagueAPI
from .mixin.clan_mixin import ClanMixin
from .mixin.player_mixin import PlayerMixin
from .mixin.wiki_mixin import WikiMixin

# SECTION: CLIENT CLASS


# KLASS: LeagueClient
class LeagueClient(
    LeagueAPI,
    WikiMixin,
    PlayerMixin,
    ClanMixin,
):
    """Full league client.

    Inherits rate limiting and decoding from LeagueAPI and the endpoint
    methods (fetch_task_page, fetch_completed_task_ids, fetch_clan_roster_csv)
    from the mixins. One instance should be shared by every service so that
    they all respect the same request spacing.
    """

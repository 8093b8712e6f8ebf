# leaguetracker/api/mixin/__init__.py

"""Endpoint mixins combined into ``LeagueClient``."""

# leaguetracker/parsers/__init__.py

"""Parsers for the wiki task page and the clan roster CSV."""

from .roster_parser import parse_clan_csv
from .wiki_parser import Locality, parse_locality, parse_task_row, parse_tasks, parse_total_task_count

__all__ = [
    "Locality",
    "parse_locality",
    "parse_task_row",
    "parse_tasks",
    "parse_total_task_count",
    "parse_clan_csv",
]

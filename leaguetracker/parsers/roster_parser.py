# leaguetracker/parsers/roster_parser.py

# SECTION: MODULE DOCSTRING
"""Parses the clan hiscores roster CSV (``name,rank,experience,kills`` per line)."""

# SECTION: IMPORTS
from __future__ import annotations

from leaguetracker.helpers._logger import log
from leaguetracker.models.clan import ClanMember

# SECTION: CONSTANTS
ROSTER_FIELDS = 4
HEADER_NAMES = frozenset({"clanmate"})


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


# FUNC: parse_clan_csv
def parse_clan_csv(csv_text: str) -> list[ClanMember]:
    """Parse roster CSV into members.

    Lines missing any of the four fields are skipped, as is the column header
    line the hiscores service sends first. Non-numeric experience or kills
    parse as 0. The service pads names with non-breaking spaces; those become
    plain spaces.
    """
    members: list[ClanMember] = []
    skipped = 0

    for line_no, line in enumerate(csv_text.strip().splitlines(), start=1):
        if not line.strip():
            continue
        fields = [field.replace("\xa0", " ").strip() for field in line.split(",")]
        if len(fields) < ROSTER_FIELDS or not all(fields[:ROSTER_FIELDS]):
            log.debug(f"Skipping malformed roster line {line_no}: {line!r}")
            skipped += 1
            continue

        name, rank, experience, kills = fields[:ROSTER_FIELDS]
        if name.lower() in HEADER_NAMES:
            continue

        members.append(
            ClanMember(
                name=name,
                rank=rank,
                experience=_to_int(experience),
                kills=_to_int(kills),
            )
        )

    if skipped:
        log.warning(f"Skipped {skipped} malformed roster line(s)")
    return members

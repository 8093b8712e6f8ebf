# leaguetracker/parsers/wiki_parser.py

# ─── Title ────────────────────────────────────────────────────────────────────
#            Wiki Task Table Parser
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Turns the wiki's league task page into Task models.

The page holds one or more ``table.wikitable`` tables whose header row carries
Locality / Task / Information / Requirements / Pts / Comp%. Each data row is
read positionally; the locality text is split into region and area.
"""

# SECTION: IMPORTS
from __future__ import annotations

import re
from typing import NamedTuple

from bs4 import BeautifulSoup
from bs4.element import Tag
from pydantic import ValidationError

from leaguetracker.api.exception import ParseError
from leaguetracker.helpers._logger import log
from leaguetracker.models.task import Task

# SECTION: CONSTANTS
HTML_PARSER = "html.parser"
TABLE_SELECTOR = "table.wikitable"
REQUIRED_HEADERS = frozenset({"Locality", "Task", "Pts"})
MIN_CELLS = 6
ROW_ID_ATTRIBUTE = "data-taskid"

LOCALITY_SEPARATOR = ":"
NO_AREA_LOCALITY = "Global"
UNKNOWN_REGION = "Unknown"
GENERAL_AREA = "General"
KNOWN_REGIONS = {
    name.lower(): name
    for name in (
        "Anachronia",
        "Morytania",
        "Kandarin",
        "Asgarnia",
        "Fremennik",
        "Desert",
        "Wilderness",
        "Misthalin",
        "Karamja",
        "Tirannwn",
    )
}

POINTS_PATTERN = re.compile(r"\d+")
PERCENT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)%")


# KLASS: Locality
class Locality(NamedTuple):
    region: str
    area: str


# SECTION: LOCALITY


# FUNC: parse_locality
def parse_locality(locality: str | None) -> Locality:
    """Split a locality string such as ``"Kandarin: Ardougne"`` into region and area.

    - blank -> ("Unknown", "General")
    - "Global" -> ("Global", "")
    - contains ":" -> split on the first colon, both parts stripped
    - a known region name (any case) -> (canonical name, "General")
    - anything else -> (text, "General")
    """
    text = (locality or "").strip()
    if not text:
        return Locality(UNKNOWN_REGION, GENERAL_AREA)

    if text == NO_AREA_LOCALITY:
        return Locality(NO_AREA_LOCALITY, "")

    if LOCALITY_SEPARATOR in text:
        region, _, area = text.partition(LOCALITY_SEPARATOR)
        return Locality(region.strip() or UNKNOWN_REGION, area.strip())

    known = KNOWN_REGIONS.get(text.lower())
    if known:
        return Locality(known, GENERAL_AREA)

    return Locality(text, GENERAL_AREA)


# SECTION: CELL HELPERS


def _cell_text(cell: Tag) -> str:
    return " ".join(cell.get_text().split())


def _locality_text(cell: Tag) -> str:
    text = _cell_text(cell)
    if text:
        return text
    # Region icons carry their name in the title attribute only
    for tag_name in ("img", "span"):
        titled = cell.find(tag_name, attrs={"title": True})
        if titled is not None:
            return str(titled["title"]).strip()
    return ""


# FUNC: parse_points
def parse_points(text: str) -> int:
    """First integer in ``text``, or 0."""
    match = POINTS_PATTERN.search(text or "")
    return int(match.group()) if match else 0


# FUNC: parse_percent
def parse_percent(text: str) -> float:
    """First ``<number>%`` in ``text``, or 0.0."""
    match = PERCENT_PATTERN.search(text or "")
    return float(match.group(1)) if match else 0.0


def _is_task_table(table: Tag) -> bool:
    headers = {_cell_text(th) for th in table.find_all("th")}
    return REQUIRED_HEADERS <= headers


# SECTION: PARSERS


# FUNC: parse_task_row
def parse_task_row(row: Tag, ordinal: int) -> Task | None:
    """Build a Task from one table row, or None when the row is not a task.

    Rows need at least six cells, a task name and a positive point value.
    """
    cells = row.find_all("td", recursive=False)
    if len(cells) < MIN_CELLS:
        return None

    locality = _locality_text(cells[0])
    description = _cell_text(cells[1])
    details = _cell_text(cells[2])
    requirements = _cell_text(cells[3])
    points = parse_points(_cell_text(cells[4]))
    completion = parse_percent(_cell_text(cells[5]))

    if not description or points <= 0:
        return None

    region, area = parse_locality(locality)
    explicit_id = (row.get(ROW_ID_ATTRIBUTE) or "").strip()
    task_id = explicit_id or f"{region}-{area}-{description}-{ordinal}"

    try:
        return Task(
            id=task_id,
            locality=locality,
            region=region,
            area=area,
            description=description,
            details=details,
            requirements=requirements,
            points=points,
            community_completion_percent=completion,
        )
    except ValidationError as e:
        log.warning(f"Skipping task row {ordinal} ({description[:30]!r}): {e}")
        return None


# FUNC: parse_tasks
def parse_tasks(html: str) -> list[Task]:
    """Parse every task table on the page.

    Raises:
        ParseError: If the document contains no table with the task headers.
    """
    soup = BeautifulSoup(html, HTML_PARSER)
    tables = [table for table in soup.select(TABLE_SELECTOR) if _is_task_table(table)]
    log.debug(f"Found {len(tables)} tables with task data")

    if not tables:
        raise ParseError("No task tables found")

    tasks: list[Task] = []
    for table_index, table in enumerate(tables, start=1):
        rows = table.find_all("tr")
        log.debug(f"Table {table_index} has {len(rows)} rows")
        for ordinal, row in enumerate(rows):
            task = parse_task_row(row, ordinal)
            if task is not None:
                tasks.append(task)

    log.info(f"Parsed {len(tasks)} tasks from wiki")
    return tasks


# FUNC: parse_total_task_count
def parse_total_task_count(html: str) -> int | None:
    """Read the ``Total`` row of the tier summary table (the first wikitable).

    Returns:
        The total number of tasks, or None when the page has no such row.
    """
    soup = BeautifulSoup(html, HTML_PARSER)
    summary = soup.select_one(TABLE_SELECTOR)
    if summary is None:
        return None

    for row in summary.find_all("tr"):
        cells = row.find_all(["td", "th"], recursive=False)
        if len(cells) >= 2 and _cell_text(cells[0]) == "Total":
            count = parse_points(_cell_text(cells[1]).replace(",", ""))
            return count or None
    return None

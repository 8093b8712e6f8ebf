# leaguetracker/__main__.py

# ─── Title ────────────────────────────────────────────────────────────────────
#          LeagueTracker Command Line Entry Point
# ──────────────────────────────────────────────────────────────────────────────

# SECTION: MODULE DOCSTRING
"""Run ``python -m leaguetracker player [name]`` or ``python -m leaguetracker clan <name>``."""

# SECTION: IMPORTS
from __future__ import annotations

import argparse
import asyncio
import logging

from rich.console import Console
from rich.table import Table

from leaguetracker.api.client import LeagueClient
from leaguetracker.api.exception import LeagueAPIError
from leaguetracker.config import LeagueConfig
from leaguetracker.helpers._logger import configure_third_party_loggers, log, setup_logging
from leaguetracker.models.clan import ClanProgress
from leaguetracker.models.player import PlayerProgress
from leaguetracker.services.clan_service import ClanService
from leaguetracker.services.player_service import PlayerService
from leaguetracker.services.stats import compute_stats

console = Console()


# SECTION: RENDERING


def render_player(progress: PlayerProgress, total_known_tasks: int) -> None:
    stats = compute_stats(progress.tasks, total_known_tasks)

    console.print(f"\n[bold]{progress.player_name}[/] ([italic]{progress.api_status.value}[/])")
    console.print(
        f"Completed {stats.completed}/{stats.total} tasks ({stats.completion_percentage}%), "
        f"{stats.earned_points}/{stats.total_points} points"
    )

    table = Table(title="Completed by tier")
    table.add_column("Tier")
    table.add_column("Tasks", justify="right")
    for tier, count in stats.completed_by_tier.items():
        table.add_row(tier.value, str(count))
    console.print(table)


def render_clan(progress: ClanProgress) -> None:
    table = Table(title=f"{progress.name}: {progress.total_clan_points} points, {progress.average_completion_rate:.1f}% average")
    table.add_column("#", justify="right")
    table.add_column("Member")
    table.add_column("Rank")
    table.add_column("Tasks", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Completion", justify="right")

    for position, member in enumerate(progress.leaderboard(), start=1):
        if member.error:
            table.add_row(str(position), member.name, member.rank, "-", "-", f"[red]{member.error}[/]")
            continue
        table.add_row(
            str(position),
            member.name,
            member.rank,
            f"{member.completed_tasks}/{member.total_tasks}",
            str(member.earned_points),
            f"{member.completion_rate:.1f}%",
        )
    console.print(table)


# SECTION: COMMANDS


async def run_player(client: LeagueClient, name: str | None) -> int:
    players = PlayerService(client)
    name = name or players.last_player()
    if not name:
        log.error("No player given and none remembered.")
        return 2

    progress = await players.resolve_player(name)
    players.remember_player(name)
    render_player(progress, await players.get_total_task_count())
    return 0


async def run_clan(client: LeagueClient, clan_name: str) -> int:
    clans = ClanService(client, PlayerService(client))

    def report(snapshot: ClanProgress) -> None:
        resolved = sum(1 for member in snapshot.members if not member.loading)
        log.info(f"{resolved}/{snapshot.total_members} members resolved")

    try:
        progress = await clans.resolve_clan(clan_name, on_progress=report)
    except LeagueAPIError as e:
        log.error(f"Could not load clan {clan_name}: {e}")
        return 1
    render_clan(progress)
    return 0


async def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="leaguetracker", description="League task progress for players and clans.")
    commands = parser.add_subparsers(dest="command", required=True)
    player_cmd = commands.add_parser("player", help="Show a player's progress")
    player_cmd.add_argument("name", nargs="?", help="Player name (defaults to the last one viewed)")
    clan_cmd = commands.add_parser("clan", help="Show a clan leaderboard")
    clan_cmd.add_argument("name", help="Clan name")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    args = parser.parse_args(argv)

    config = LeagueConfig()
    setup_logging(log_dir=config.data_dir / "logs", console_level=logging.DEBUG if args.verbose else logging.INFO)
    configure_third_party_loggers()

    async with LeagueClient(config) as client:
        if args.command == "player":
            return await run_player(client, args.name)
        return await run_clan(client, args.name)


def run() -> None:
    raise SystemExit(asyncio.run(main()))


# --- Script Execution ---
if __name__ == "__main__":
    run()

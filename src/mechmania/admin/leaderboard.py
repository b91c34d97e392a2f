"""Leaderboard of every team with an uploaded bot."""
import logging
from dataclasses import dataclass
from typing import List

from mechmania.api import MechManiaClient
from mechmania.types import Team, TeamStats

logger = logging.getLogger(__name__)

NAME_WIDTH = 20


@dataclass(slots=True)
class Standing:
    team: str
    stats: TeamStats


def collect_standings(client: MechManiaClient, team: Team) -> List[Standing]:
    """Fetch the stats of every team's latest script, best score first."""
    standings = []
    for entry in client.teams(team):
        if entry.script is None:
            continue
        stats = client.stats(entry.team, entry.script.key)
        standings.append(Standing(team=entry.team.name, stats=stats))
    # stable sort keeps backend order for ties
    standings.sort(key=lambda standing: standing.stats.score, reverse=True)
    return standings


def format_standing(rank: int, standing: Standing) -> str:
    name = standing.team.ljust(NAME_WIDTH)[:NAME_WIDTH]
    stats = standing.stats
    return (
        f"{rank:>3}. Team: {name} Score: {stats.score} "
        f"Wins: {stats.wins} Losses: {stats.losses} Ties: {stats.ties}"
    )


def show(client: MechManiaClient, team: Team) -> int:
    standings = collect_standings(client, team)
    if not standings:
        print("No team has uploaded a bot yet.")
        return 0
    for rank, standing in enumerate(standings, 1):
        print(format_standing(rank, standing))
    return 0

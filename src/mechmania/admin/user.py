"""Inspect a single team: details, stats, script versions or match results."""
import logging
from typing import Callable, Dict, List, Optional

from mechmania.api import MechManiaClient
from mechmania.types import Team, TeamEntry
from mechmania.utils.prompts import select

logger = logging.getLogger(__name__)

MODES = ["stats", "info", "versions", "matches"]
NAME_WIDTH = 20


def show_info(client: MechManiaClient, team: Team, chosen: TeamEntry, entries: List[TeamEntry]) -> None:
    print(f"Name: {chosen.team.name}")
    print(f"Email: {chosen.team.email}")
    print(f"Token: {chosen.team.token}")
    if chosen.script is None:
        print("No script uploaded yet")
        return
    print(f"Latest script url: {chosen.script.url}")
    print(f"Latest script created at: {chosen.script.created_at}")


def show_stats(client: MechManiaClient, team: Team, chosen: TeamEntry, entries: List[TeamEntry]) -> None:
    if chosen.script is None:
        print(f"{chosen.team.name} has not uploaded a script yet")
        return
    stats = client.stats(chosen.team, chosen.script.key)
    print(f"Name:       {chosen.team.name}")
    print(f"Wins:       {stats.wins}")
    print(f"Losses:     {stats.losses}")
    print(f"Ties:       {stats.ties}")
    print(f"Score:      {stats.score}")


def show_versions(client: MechManiaClient, team: Team, chosen: TeamEntry, entries: List[TeamEntry]) -> None:
    for version in client.versions(chosen.team):
        print(version.created_at)


def resolve_opponents(opponents: List[Dict], entries: List[TeamEntry]) -> List[Optional[str]]:
    """Map each opponent's script key to the owning team's name (None when unknown)."""
    names_by_key = {entry.script.key: entry.team.name for entry in entries if entry.script is not None}
    return [names_by_key.get(opponent.get("key")) for opponent in opponents]


def show_matches(client: MechManiaClient, team: Team, chosen: TeamEntry, entries: List[TeamEntry]) -> None:
    history = client.matches(chosen.team)
    names = resolve_opponents(history["oponentInfo"], entries)
    wins = history["wins"]
    for index, name in enumerate(names):
        if name is None or index >= len(wins):
            continue
        print(f" {name.ljust(NAME_WIDTH)[:NAME_WIDTH]}  : {wins[index]}")


HANDLERS: Dict[str, Callable[[MechManiaClient, Team, TeamEntry, List[TeamEntry]], None]] = {
    "stats": show_stats,
    "info": show_info,
    "versions": show_versions,
    "matches": show_matches,
}


def show(client: MechManiaClient, team: Team) -> int:
    entries = client.teams(team)
    if not entries:
        print("No teams registered yet.")
        return 0

    chosen = select("Which team?", [(entry.team.name, entry) for entry in entries])
    mode = select("What do you want to see?", [(mode, mode) for mode in MODES])
    logger.debug("Showing %s for %s", mode, chosen.team.name)
    HANDLERS[mode](client, team, chosen, entries)
    return 0

"""
Stores the logged-in team between invocations.

The team is kept as JSON in the mm home directory (team.json) so that
admin and remote play commands can authenticate without asking again.
"""
import json
import logging
from pathlib import Path
from typing import Optional

from mechmania.types import Team
from mechmania.utils.filesystem import ensure_directory

logger = logging.getLogger(__name__)


def save_team(team: Team, team_file: Path) -> Path:
    """Persist team credentials, readable by the current user only."""
    ensure_directory(team_file.parent)
    with open(team_file, "w", encoding="utf-8") as f:
        json.dump(team.to_dict(), f, indent=2)
    team_file.chmod(0o600)
    logger.debug("Saved team %s to %s", team.name, team_file)
    return team_file


def get_team(team_file: Path) -> Optional[Team]:
    """Return the stored team, or None when nobody is logged in."""
    if not team_file.exists():
        return None
    try:
        with open(team_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError:
        logger.warning("Ignoring corrupt team file: %s", team_file)
        return None
    if not isinstance(data, dict) or not data.get("token"):
        return None
    return Team.from_dict(data)


def clear_team(team_file: Path) -> bool:
    """Forget the stored team. Returns True if a team was stored."""
    if not team_file.exists():
        return False
    team_file.unlink()
    return True

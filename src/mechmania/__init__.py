"""Command-line companion for the MechMania programming game."""

from mechmania.api import MechManiaApiError, MechManiaClient
from mechmania.config import MechManiaConfig, get_config
from mechmania.types import PlayError, PlayErrorKind, RunOutcome, Script, Team, TeamEntry, TeamStats

__version__ = "0.1.0"

__all__ = [
    "MechManiaClient",
    "MechManiaApiError",
    "MechManiaConfig",
    "get_config",
    "PlayError",
    "PlayErrorKind",
    "RunOutcome",
    "Script",
    "Team",
    "TeamEntry",
    "TeamStats",
]

"""Type definitions shared across the mechmania CLI."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass(slots=True)
class Team:
    """A registered competition team."""

    name: str
    email: str = ""
    token: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        return cls(
            name=data.get("name", ""),
            email=data.get("email", ""),
            token=data.get("token", ""),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "email": self.email, "token": self.token}


@dataclass(slots=True)
class Script:
    """One uploaded version of a team's bot."""

    key: str
    url: str = ""
    created_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Script":
        return cls(
            key=data.get("key", ""),
            url=data.get("url", ""),
            created_at=data.get("createdAt", ""),
        )


@dataclass(slots=True)
class TeamEntry:
    """A team as listed by the backend, with its latest script if any."""

    team: Team
    script: Optional[Script] = None


@dataclass(slots=True)
class TeamStats:
    """Win/loss/tie record of a script."""

    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def score(self) -> int:
        return 3 * self.wins + self.ties


@dataclass(slots=True)
class RunOutcome:
    """Exit status and captured stdout of an external process."""

    exit_code: int
    stdout: bytes = b""


class PlayErrorKind(Enum):
    """Every way the play workflow can abort."""

    VISUALIZER_MISSING = "visualizer_missing"
    NOT_A_DIRECTORY = "not_a_directory"
    INACCESSIBLE_PATH = "inaccessible_path"
    EXTERNAL_PROCESS = "external_process"
    NETWORK = "network"
    FILESYSTEM = "filesystem"


class PlayError(RuntimeError):
    """Raised when a play step fails; carries the exit code for the process."""

    def __init__(self, kind: PlayErrorKind, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.kind = kind
        self.exit_code = exit_code

"""Client for the MechMania backend API."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests

from mechmania.config import MechManiaConfig, get_config
from mechmania.types import Script, Team, TeamEntry, TeamStats

logger = logging.getLogger(__name__)


class MechManiaApiError(RuntimeError):
    """Raised when a MechMania API call fails."""


class MechManiaClient:
    """Client for logging in, registering and querying teams on the MechMania backend."""

    def __init__(self, config: Optional[MechManiaConfig] = None) -> None:
        """
        Initialize the client.

        Args:
            config: Loaded configuration. If None, loads it from the environment.
        """
        self.config = config or get_config()
        self.api_url = self._ensure_trailing_slash(self.config.api_url)
        self.timeout = self.config.timeout
        self.session = requests.Session()

    @staticmethod
    def _ensure_trailing_slash(url: str) -> str:
        cleaned = url.strip()
        if not cleaned:
            raise ValueError("URL cannot be empty")
        return cleaned if cleaned.endswith("/") else f"{cleaned}/"

    @staticmethod
    def _auth_headers(team: Optional[Team]) -> Dict[str, str]:
        if team is None or not team.token:
            return {}
        return {"Authorization": f"Bearer {team.token}"}

    def login(self, token: str) -> Optional[Team]:
        """
        Exchange a team token for the team's details.

        Args:
            token: The team token handed out at registration.

        Returns:
            The Team, or None if the token was rejected.

        Raises:
            ValueError: If token is empty.
            MechManiaApiError: If the server fails for any other reason.
        """
        if not token or not token.strip():
            raise ValueError("token must be a non-empty string")

        response = self._send("GET", self.config.login_url, headers={"Authorization": f"Bearer {token.strip()}"})
        if response.status_code == 401:
            return None
        if response.status_code != 200:
            raise MechManiaApiError(f"An unknown error occurred on the server {response.status_code}")

        team = Team.from_dict(response.json())
        if not team.token:
            team.token = token.strip()
        return team

    def register(self, name: str, email: str) -> Optional[Team]:
        """
        Register a new team.

        Returns:
            The created Team, or None if registration was refused.

        Raises:
            ValueError: If name or email is empty.
            MechManiaApiError: If the server fails for any other reason.
        """
        if not name or not name.strip():
            raise ValueError("name must be a non-empty string")
        if not email or not email.strip():
            raise ValueError("email must be a non-empty string")

        response = self._send("POST", self.config.register_url, json={"name": name.strip(), "email": email.strip()})
        if response.status_code == 401:
            return None
        if response.status_code != 200:
            raise MechManiaApiError(f"An unknown error occurred on the server {response.status_code}")
        return Team.from_dict(response.json())

    def teams(self, team: Team) -> List[TeamEntry]:
        """Return every team known to the backend, each with its latest script."""
        data = self._request("GET", "teams", team=team)
        entries = data.get("teams", []) if isinstance(data, dict) else data or []
        result = []
        for entry in entries:
            script = entry.get("script") or entry.get("latestScript")
            result.append(
                TeamEntry(
                    team=Team.from_dict(entry.get("team", entry)),
                    script=Script.from_dict(script) if script else None,
                )
            )
        return result

    def stats(self, team: Team, script_key: str) -> TeamStats:
        """Return the win/loss/tie record of one script."""
        if not script_key:
            raise ValueError("script_key must be a non-empty string")
        data = self._request("GET", f"stats/{script_key}", team=team) or {}
        return TeamStats(
            wins=int(data.get("wins", 0)),
            losses=int(data.get("losses", 0)),
            ties=int(data.get("ties", 0)),
        )

    def versions(self, team: Team) -> List[Script]:
        """Return every script version uploaded by the team."""
        data = self._request("GET", "versions", team=team) or []
        return [Script.from_dict(item) for item in data]

    def matches(self, team: Team) -> Dict[str, Any]:
        """Return the team's match history: opponent script keys and wins against each."""
        data = self._request("GET", "matches", team=team) or {}
        return {
            "oponentInfo": data.get("oponentInfo", []),
            "wins": data.get("wins", []),
        }

    def play(self, payload: bytes, team: Optional[Team] = None) -> bytes:
        """
        Submit a gzipped bot tarball for a remote game.

        Args:
            payload: The gzip-compressed tar archive of the bot directory.
            team: Logged-in team, sent as bearer auth when available.

        Returns:
            The game log produced by the remote engine.

        Raises:
            MechManiaApiError: If the submission is rejected or the request fails.
        """
        if not payload:
            raise ValueError("payload must be non-empty")
        headers = {"Content-Type": "application/gzip"}
        headers.update(self._auth_headers(team))
        url = urljoin(self.api_url, "play")
        # Remote builds have no upper bound on duration.
        response = self._send("POST", url, data=payload, headers=headers, timeout=None)
        self._raise_for_status(response)
        return response.content

    def _request(self, method: str, path: str, *, team: Optional[Team] = None, **kwargs: Any) -> Any:
        url = urljoin(self.api_url, path.lstrip("/"))
        headers = kwargs.pop("headers", {})
        headers.update(self._auth_headers(team))
        response = self._send(method, url, headers=headers, **kwargs)
        self._raise_for_status(response)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MechManiaApiError(f"Invalid JSON returned by {url}") from exc

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        logger.debug("%s %s", method, url)
        try:
            return self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise MechManiaApiError(f"Request to {url} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            detail = response.text.strip() if response.text else ""
            message = f"Server returned {response.status_code}"
            if detail:
                message = f"{message}: {detail}"
            raise MechManiaApiError(message) from exc

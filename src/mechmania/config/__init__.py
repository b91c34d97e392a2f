"""
Configuration module for the mm CLI.
Loads packaged defaults, an optional user settings file and environment variables.
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"
DEFAULT_HOME_DIR = Path.home() / ".mm"
LOG_FILENAME = "last.log.txt"


def load_settings(settings_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load packaged defaults and merge a user settings file over them.

    Args:
        settings_file: Path to a YAML file with overrides. Missing files are ignored.

    Returns:
        Dict of merged settings.

    Raises:
        ValueError: If a settings file does not contain a mapping.
    """
    with open(DEFAULT_SETTINGS_PATH, "r", encoding="utf-8") as f:
        settings = yaml.safe_load(f) or {}

    if settings_file is not None and settings_file.exists():
        with open(settings_file, "r", encoding="utf-8") as f:
            overrides = yaml.safe_load(f) or {}
        if not isinstance(overrides, dict):
            raise ValueError(f"Settings file must contain a mapping: {settings_file}")
        settings.update(overrides)

    return settings


def default_visualizer_name(platform: str = sys.platform) -> str:
    """Name of the visualizer executable inside the install directory."""
    if platform.startswith("win"):
        return "visualizer.exe"
    return "visualizer"


class MechManiaConfig:
    """Load and validate mm configuration from settings files and environment."""

    def __init__(self, env_file: Optional[Path] = None, settings_file: Optional[Path] = None):
        """
        Initialize configuration.

        Args:
            env_file: Path to .env file. If None, python-dotenv searches from the working directory.
            settings_file: YAML overrides. If None, uses settings.yaml in the home directory.

        Raises:
            ValueError: If a numeric setting cannot be parsed.
        """
        load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

        self.home_dir = Path(os.getenv("MM_HOME", str(DEFAULT_HOME_DIR))).expanduser()
        if settings_file is None:
            settings_file = self.home_dir / "settings.yaml"
        settings = load_settings(settings_file)

        self.login_url: str = os.getenv("MM_LOGIN_URL", settings["login_url"])
        self.register_url: str = os.getenv("MM_REGISTER_URL", settings["register_url"])
        self.api_url: str = os.getenv("MM_API_URL", settings["api_url"])
        self.timeout = self._parse_int("MM_TIMEOUT", settings.get("timeout", 30))

        self.engine_image: str = os.getenv("MM_ENGINE_IMAGE", settings["engine_image"])
        self.bot_tags: List[str] = list(settings["bot_tags"])
        self.docker_socket: str = os.getenv("MM_DOCKER_SOCKET", settings["docker_socket"])

        self.tmp_dir = Path(
            os.getenv("MM_TMP_DIR", settings.get("tmp_dir") or str(Path(tempfile.gettempdir()) / "mm"))
        ).expanduser()
        self.log_path = self.tmp_dir / LOG_FILENAME

        self.visualizer_dir = Path(
            os.getenv("MM_VISUALIZER_DIR", settings.get("visualizer_dir") or str(self.home_dir / "visualizer"))
        ).expanduser()
        self.visualizer_name: str = os.getenv(
            "MM_VISUALIZER_NAME", settings.get("visualizer_name") or default_visualizer_name()
        )
        self.visualizer_urls: Dict[str, str] = dict(settings.get("visualizer_urls", {}))

    @property
    def visualizer_path(self) -> Path:
        return self.visualizer_dir / self.visualizer_name

    @property
    def team_file(self) -> Path:
        return self.home_dir / "team.json"

    @staticmethod
    def _parse_int(key: str, default: Any) -> int:
        raw = os.getenv(key)
        value = default if raw is None else raw
        try:
            parsed = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{key} must be an integer, got: {value!r}") from exc
        if parsed <= 0:
            raise ValueError(f"{key} must be a positive integer")
        return parsed


def get_config(env_file: Optional[Path] = None, settings_file: Optional[Path] = None) -> MechManiaConfig:
    """
    Get mm configuration.

    Args:
        env_file: Path to .env file (for testing).
        settings_file: Path to YAML overrides (for testing).

    Returns:
        MechManiaConfig instance.
    """
    return MechManiaConfig(env_file, settings_file)

import os
import stat
from pathlib import Path

import pytest

from mechmania.config import MechManiaConfig
from mechmania.types import RunOutcome


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Configuration whose home, temp and visualizer directories live under tmp_path."""
    for key in list(os.environ):
        if key.startswith("MM_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("MM_HOME", str(tmp_path / "home"))
    monkeypatch.setenv("MM_TMP_DIR", str(tmp_path / "tmp"))
    monkeypatch.setenv("MM_VISUALIZER_DIR", str(tmp_path / "visualizer"))
    monkeypatch.setenv("MM_VISUALIZER_NAME", "visualizer")
    return MechManiaConfig(env_file=tmp_path / "missing.env")


@pytest.fixture
def installed_visualizer(config):
    """Create an executable stand-in for the visualizer binary."""
    config.visualizer_dir.mkdir(parents=True, exist_ok=True)
    path = config.visualizer_path
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


@pytest.fixture
def bot_dir(tmp_path) -> Path:
    bot = tmp_path / "mybot"
    bot.mkdir()
    (bot / "Dockerfile").write_text("FROM python:3.12-slim\nCOPY . /bot\n")
    (bot / "bot.py").write_text("print('hello')\n")
    return bot


class FakeRunner:
    """Records commands and returns scripted outcomes in order."""

    def __init__(self, outcomes=None):
        self.outcomes = list(outcomes or [])
        self.calls = []

    def __call__(self, command, capture_output=False):
        self.calls.append((list(command), capture_output))
        if self.outcomes:
            return self.outcomes.pop(0)
        return RunOutcome(exit_code=0)


@pytest.fixture
def fake_runner():
    return FakeRunner

"""Locating and launching the external game visualizer."""
import logging
from pathlib import Path

from mechmania.config import MechManiaConfig
from mechmania.utils.filesystem import is_executable_file
from mechmania.utils.run import Runner, exit_status, run

logger = logging.getLogger(__name__)


def get_visualizer(config: MechManiaConfig) -> Path:
    return config.visualizer_path


def is_installed(config: MechManiaConfig) -> bool:
    return is_executable_file(get_visualizer(config))


def launch(log_path: Path, config: MechManiaConfig, runner: Runner = run) -> int:
    """
    Open a game log in the visualizer and wait for it to close.

    Args:
        log_path: Captured engine output to replay.
        config: Configuration holding the visualizer location.
        runner: Subprocess runner (injected in tests).

    Returns:
        The visualizer's exit status.
    """
    visualizer = get_visualizer(config)
    logger.info("Launching visualizer %s", visualizer)
    outcome = runner([str(visualizer), str(log_path)])
    if outcome.exit_code != 0:
        logger.warning("Visualizer exited with code %s", outcome.exit_code)
    return exit_status(outcome.exit_code)

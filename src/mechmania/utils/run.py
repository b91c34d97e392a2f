"""
Blocking subprocess invocation for external tools (docker, the visualizer).
"""
import logging
import shlex
import subprocess
from typing import Callable, List

from mechmania.types import RunOutcome

logger = logging.getLogger(__name__)

COMMAND_NOT_FOUND = 127

Runner = Callable[..., RunOutcome]


def run(command: List[str], capture_output: bool = False) -> RunOutcome:
    """
    Run a command to completion, inheriting the terminal.

    Args:
        command: Program and arguments.
        capture_output: Capture stdout instead of streaming it to the terminal.
            stderr is always left attached so progress stays visible.

    Returns:
        RunOutcome with the exit code and captured stdout (empty when not captured).
    """
    logger.debug("Running: %s", shlex.join(command))
    try:
        result = subprocess.run(
            command,
            stdout=subprocess.PIPE if capture_output else None,
            check=False,
        )
    except FileNotFoundError:
        logger.error("Command not found: %s. Is it installed and on your PATH?", command[0])
        return RunOutcome(exit_code=COMMAND_NOT_FOUND)

    return RunOutcome(exit_code=result.returncode, stdout=result.stdout or b"")


def exit_status(code: int) -> int:
    """Map a subprocess return code to a process exit status (signals become 128 + signum)."""
    if code < 0:
        return 128 - code
    return code

"""Play a bot against itself and replay the game in the visualizer.

Local games build the bot with docker and run the engine image, which starts
the bot containers through the mounted docker socket. Remote games upload the
bot directory as a gzipped tarball and receive the engine log in the response.
Either way the log is written to a fixed file in the temp directory and handed
to the visualizer.
"""
import io
import logging
import stat
import tarfile
from pathlib import Path
from typing import List, Optional

from mechmania.api import MechManiaApiError, MechManiaClient
from mechmania.config import MechManiaConfig
from mechmania.types import PlayError, PlayErrorKind, Team
from mechmania.utils import visualize
from mechmania.utils.filesystem import write_bytes
from mechmania.utils.run import Runner, exit_status, run

logger = logging.getLogger(__name__)


def check_preconditions(script: Path, visualizer: bool, config: MechManiaConfig) -> None:
    """
    Validate the visualizer install and the bot directory before doing any work.

    Raises:
        PlayError: VISUALIZER_MISSING, INACCESSIBLE_PATH or NOT_A_DIRECTORY.
    """
    if visualizer and not visualize.is_installed(config):
        raise PlayError(
            PlayErrorKind.VISUALIZER_MISSING,
            f"Could not find visualizer at {visualize.get_visualizer(config)}. "
            "Run `mm download` before trying this again.",
        )

    try:
        mode = script.stat().st_mode
    except OSError as exc:
        raise PlayError(
            PlayErrorKind.INACCESSIBLE_PATH,
            f"Error accessing the directory {script}. Are you sure it exists and you have permission to access it?",
        ) from exc

    if not stat.S_ISDIR(mode):
        raise PlayError(
            PlayErrorKind.NOT_A_DIRECTORY,
            f"{script} is not a directory. Make sure to run mm play on a directory, not a file.",
        )


def archive_bot(script: Path) -> bytes:
    """Pack the bot directory into a gzipped tarball with its contents at the archive root."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for entry in sorted(script.iterdir()):
            tar.add(entry, arcname=entry.name)
    return buffer.getvalue()


def run_remote(script: Path, client: MechManiaClient, team: Optional[Team] = None) -> bytes:
    """Build and play the bot on the MechMania servers, returning the game log."""
    logger.warning("Cloud builds with --remote are an experimental feature")
    logger.info("This could take a while...")
    payload = archive_bot(script)
    logger.debug("Uploading %d bytes", len(payload))
    try:
        return client.play(payload, team=team)
    except MechManiaApiError as exc:
        raise PlayError(PlayErrorKind.NETWORK, f"Remote play failed: {exc}") from exc


def _step(runner: Runner, command: List[str], error: str, capture_output: bool = False) -> bytes:
    outcome = runner(command, capture_output=capture_output)
    if outcome.exit_code != 0:
        code = exit_status(outcome.exit_code)
        raise PlayError(PlayErrorKind.EXTERNAL_PROCESS, f"{error} (exit code {code})", exit_code=code)
    return outcome.stdout


def run_local(script: Path, config: MechManiaConfig, runner: Runner = run) -> bytes:
    """
    Pull the engine, build the bot and run a self-play game with docker.

    Args:
        script: Bot directory containing a Dockerfile.
        config: Engine image, bot tags and docker socket location.
        runner: Subprocess runner (injected in tests).

    Returns:
        The engine's stdout, i.e. the game log.

    Raises:
        PlayError: EXTERNAL_PROCESS with the failing step's exit code. Later steps are skipped.
    """
    logger.info("Updating game binary")
    _step(runner, ["docker", "pull", config.engine_image], "Error updating the game binary")

    logger.info("Building your bot at %s", script)
    build = ["docker", "build", str(script)]
    for tag in config.bot_tags:
        build.extend(["-t", tag])
    _step(runner, build, "Error building your bot")
    # TODO: accept a second bot directory and build it under the second tag instead of self-play

    logger.info("Running game against your own bot")
    socket = config.docker_socket
    return _step(
        runner,
        ["docker", "run", "-v", f"{socket}:{socket}", "--rm", "-i", config.engine_image],
        "Error running the game",
        capture_output=True,
    )


def write_log(result: bytes, log_path: Path) -> Path:
    """
    Write the game log, replacing the previous one.

    Raises:
        PlayError: FILESYSTEM if the directory or file cannot be written.
    """
    try:
        return write_bytes(log_path, result)
    except OSError as exc:
        raise PlayError(PlayErrorKind.FILESYSTEM, f"Could not write log file {log_path}: {exc}") from exc


def play(
    script: Path,
    config: MechManiaConfig,
    remote: bool = False,
    visualizer: bool = True,
    logfile: Optional[Path] = None,
    client: Optional[MechManiaClient] = None,
    team: Optional[Team] = None,
    runner: Runner = run,
) -> int:
    """
    Validate, play, log and visualize a game with the given bot.

    Args:
        script: Bot directory.
        config: Loaded configuration.
        remote: Play on the MechMania servers instead of local docker.
        visualizer: Open the visualizer on the resulting log.
        logfile: Extra location to save the log to.
        client: API client for remote play. Created from config when needed.
        team: Logged-in team, sent along with remote submissions.
        runner: Subprocess runner (injected in tests).

    Returns:
        Process exit code: the visualizer's when it was launched, otherwise 0.

    Raises:
        PlayError: On any failed step.
    """
    script = script.resolve()
    check_preconditions(script, visualizer, config)

    if remote:
        result = run_remote(script, client or MechManiaClient(config), team)
    else:
        result = run_local(script, config, runner)

    log_path = write_log(result, config.log_path)
    logger.info("Game log written to %s", log_path)
    if logfile is not None:
        write_log(result, logfile)
        logger.info("Game log saved to %s", logfile)

    if not visualizer:
        return 0

    logger.info("Setting up visualizer")
    return visualize.launch(log_path, config, runner)

"""Visualizer installer.

Downloads the visualizer tarball for the current operating system and unpacks
it into the visualizer directory, dropping the archive's top-level folder.
"""
import logging
import shutil
import sys
import tarfile
import tempfile
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional

import requests

from mechmania.config import MechManiaConfig
from mechmania.utils.filesystem import ensure_directory

logger = logging.getLogger(__name__)

CHUNK_TIMEOUT = 60  # seconds without data before giving up


def platform_key(platform: str = sys.platform) -> str:
    """Map sys.platform onto the keys used by the visualizer_urls setting."""
    if platform.startswith("win"):
        return "win32"
    if platform.startswith("linux"):
        return "linux"
    return platform


def get_download_url(config: MechManiaConfig, platform: str = sys.platform) -> str:
    """
    Return the visualizer download URL for a platform.

    Raises:
        ValueError: If no visualizer build exists for the platform.
    """
    key = platform_key(platform)
    url = config.visualizer_urls.get(key)
    if not url:
        supported = ", ".join(sorted(config.visualizer_urls)) or "none"
        raise ValueError(f"No visualizer available for platform '{platform}'. Supported: {supported}")
    return url


def strip_components(members: Iterator[tarfile.TarInfo], count: int = 1) -> Iterator[tarfile.TarInfo]:
    """Drop the first `count` path components of every member, skipping what is left empty or unsafe."""
    for member in members:
        parts = PurePosixPath(member.name).parts[count:]
        if not parts or ".." in parts or PurePosixPath(member.name).is_absolute():
            continue
        member.name = str(PurePosixPath(*parts))
        yield member


def download_visualizer(config: MechManiaConfig, platform: Optional[str] = None) -> int:
    """
    Replace the installed visualizer with a fresh download.

    Args:
        config: Configuration holding the visualizer directory and download URLs.
        platform: Override sys.platform (for testing).

    Returns:
        Number of files extracted.

    The archive is unpacked into a staging directory next to the install and
    only swapped in once extraction succeeded, so a failed download keeps the
    previous visualizer.

    Raises:
        ValueError: If the platform is not supported.
        requests.RequestException: If the download fails.
        tarfile.TarError: If the archive is corrupt.
    """
    url = get_download_url(config, platform or sys.platform)
    target = config.visualizer_dir
    staging = Path(tempfile.mkdtemp(prefix=".visualizer-", dir=ensure_directory(target.parent)))

    try:
        extracted = _fetch(url, staging)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    if target.exists():
        shutil.rmtree(target)
    staging.rename(target)
    logger.info("Installed %d files into %s", extracted, target)
    return extracted


def _fetch(url: str, dest: Path) -> int:
    logger.info("Downloading the visualizer from %s", url)
    response = requests.get(url, stream=True, timeout=CHUNK_TIMEOUT)
    response.raise_for_status()
    response.raw.decode_content = True

    extracted = 0
    with tarfile.open(fileobj=response.raw, mode="r|gz") as tar:
        for member in strip_components(tar):
            tar.extract(member, path=dest, filter="data")
            if member.isfile():
                extracted += 1
    return extracted

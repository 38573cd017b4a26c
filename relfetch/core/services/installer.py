"""
Installer — download, unpack and place the release binary.

Order of operations:

    1. mkdir -p <destination>        (nothing is downloaded if this fails)
    2. GET archive | tar xz <binary> (streamed, into a private temp dir)
    3. mv <binary> <destination>/
    4. chmod +x <destination>/<binary>

Directories created in step 1 (the destination and any missing parents)
are removed again, deepest first, when a later step fails.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from relfetch.adapters.net.http import DOWNLOAD_TIMEOUT, UrlOpener, open_url
from relfetch.adapters.shell.filesystem import FilesystemAdapter
from relfetch.core.errors import InstallError, InstallerError, TransportError, UnpackError
from relfetch.core.models.install import InstallConfig
from relfetch.core.models.platform import PlatformTarget
from relfetch.core.models.receipt import Receipt
from relfetch.core.models.release import DownloadArtifact, ReleaseAssetUrl, ReleaseTag
from relfetch.core.models.settings import InstallerSettings
from relfetch.core.services.archive import extract_binary

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class InstallOutcome:
    url: str
    installed_path: Path
    created_directory: bool


def build_download_url(
    settings: InstallerSettings,
    target: PlatformTarget,
    tag: ReleaseTag | None,
) -> ReleaseAssetUrl:
    """Download URL for ``target`` at ``tag`` (``None`` = latest alias)."""
    return ReleaseAssetUrl(
        host=settings.download_host,
        repository=settings.repository,
        tag=tag.value if tag is not None else None,
        binary=settings.binary,
        target_triple=target.target_triple,
    )


def open_artifact(url: str, *, opener: UrlOpener = open_url) -> DownloadArtifact:
    """Start the archive download. Raises TransportError on failure."""
    stream = opener(url, timeout=DOWNLOAD_TIMEOUT, accept="application/octet-stream")
    return DownloadArtifact(url=url, stream=stream)


def install_artifact(
    asset_url: ReleaseAssetUrl,
    config: InstallConfig,
    *,
    fs: FilesystemAdapter | None = None,
    opener: UrlOpener = open_url,
    progress: ProgressCallback | None = None,
) -> InstallOutcome:
    """Install the archive at ``asset_url`` into the configured directory.

    Args:
        asset_url: Where the release archive lives.
        config: Destination and elevation settings.
        fs: Filesystem adapter; defaults to one matching ``config``.
        opener: URL opener (swapped for a fake in tests).
        progress: Callback receiving one-line status messages.

    Returns:
        InstallOutcome with the final binary path.

    Raises:
        InstallError: Directory creation, move or chmod failed.
        TransportError: The download failed.
        UnpackError: The archive was corrupt or lacked the binary.
    """
    progress = progress or (lambda _msg: None)
    fs = fs or FilesystemAdapter(elevate=config.elevation_required)
    dest = config.destination_directory
    binary = asset_url.binary
    what = f"{binary} {asset_url.tag or 'latest'} for {asset_url.target_triple}"

    if not fs.is_available():
        raise InstallError(
            f"Installing to {dest} requires sudo, which is not available",
            hint="Run as root, or install without --system.",
        )

    created = _missing_directories(dest)
    _require(fs.make_dir(dest), f"Cannot create install directory {dest}")

    try:
        with tempfile.TemporaryDirectory(prefix="relfetch-") as tmp:
            progress(f"Downloading {binary} for {asset_url.target_triple}...")
            extracted = _download_and_unpack(asset_url, Path(tmp), opener=opener, what=what)

            target = dest / binary
            progress(f"Installing to {dest}...")
            _require(fs.move(extracted, target), f"Cannot move {binary} into {dest}")

            _require(fs.make_executable(target), f"Cannot mark {target} executable")
    except InstallerError:
        _rollback_directories(fs, created)
        raise

    logger.info("Installed %s to %s", what, target)
    return InstallOutcome(url=asset_url.url, installed_path=target, created_directory=bool(created))


def _download_and_unpack(
    asset_url: ReleaseAssetUrl,
    workdir: Path,
    *,
    opener: UrlOpener,
    what: str,
) -> Path:
    try:
        artifact = open_artifact(asset_url.url, opener=opener)
    except TransportError as e:
        hint = None
        if e.status == 404:
            hint = f"Check that the release exists and ships {asset_url.archive_name}."
        raise TransportError(
            f"Failed to download {what}: {e.message}", hint=hint, status=e.status, url=e.url,
        ) from e

    try:
        return extract_binary(artifact.stream, asset_url.binary, workdir)
    except UnpackError as e:
        raise UnpackError(f"Failed to unpack {what} from {asset_url.url}: {e.message}") from e
    finally:
        artifact.close()


def _missing_directories(dest: Path) -> list[Path]:
    """Directories ``mkdir -p dest`` will create, deepest first."""
    missing = []
    current = dest
    while not current.exists() and current != current.parent:
        missing.append(current)
        current = current.parent
    return missing


def _rollback_directories(fs: FilesystemAdapter, created: list[Path]) -> None:
    """Remove what this run created, from the destination upward."""
    for directory in created:
        receipt = fs.remove_empty_dir(directory)
        if receipt.failed:
            logger.warning("Could not remove %s after failed install: %s", directory, receipt.error)
            return
        logger.debug("Removed %s created by the failed install", directory)


def _require(receipt: Receipt, message: str) -> None:
    """Raise InstallError when an install step failed."""
    logger.debug(receipt.summary())
    if receipt.failed:
        raise InstallError(f"{message}: {receipt.error}")

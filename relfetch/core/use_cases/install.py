"""
Install use case — the whole pipeline for one invocation.

    platform  →  release tag  →  download URL  →  install  →  PATH advisory

Each stage must succeed before the next starts; the first
``InstallerError`` aborts the run and propagates to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from relfetch.adapters.net.http import UrlOpener, open_url
from relfetch.adapters.shell.filesystem import FilesystemAdapter
from relfetch.core.models.install import HostEnvironment, InstallConfig
from relfetch.core.models.platform import PlatformTarget
from relfetch.core.models.release import ReleaseTag
from relfetch.core.models.settings import InstallerSettings
from relfetch.core.services.installer import (
    ProgressCallback,
    build_download_url,
    install_artifact,
)
from relfetch.core.services.path_advisory import path_advisory
from relfetch.core.services.platform_resolver import resolve_host_platform
from relfetch.core.services.release_client import GitHubReleaseClient, ReleaseClient
from relfetch.core.services.release_resolver import resolve_release_tag

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """What one run decided and did."""

    binary: str
    target: PlatformTarget
    tag: ReleaseTag
    url: str
    destination: Path
    installed_path: Path | None = None
    path_advisory: str | None = None
    dry_run: bool = False

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "binary": self.binary,
            "target_triple": self.target.target_triple,
            "os": self.target.os_family.value,
            "arch": self.target.cpu_architecture,
            "tag": self.tag.value,
            "tag_source": self.tag.source,
            "url": self.url,
            "destination": str(self.destination),
            "installed_path": str(self.installed_path) if self.installed_path else None,
            "path_advisory": self.path_advisory,
            "dry_run": self.dry_run,
        }


def run_install(
    config: InstallConfig,
    settings: InstallerSettings,
    host: HostEnvironment,
    *,
    client: ReleaseClient | None = None,
    fs: FilesystemAdapter | None = None,
    opener: UrlOpener = open_url,
    progress: ProgressCallback | None = None,
    dry_run: bool = False,
) -> InstallResult:
    """Resolve and install one release binary.

    Args:
        config: Parsed install options.
        settings: Repository, binary and host settings.
        host: OS name, architecture and search path of the machine.
        client: Release index client; built from settings when omitted.
        fs: Filesystem adapter; built from ``config`` when omitted.
        opener: URL opener used for the archive download.
        progress: Callback receiving one-line status messages.
        dry_run: Resolve everything but do not touch the filesystem.

    Returns:
        InstallResult.

    Raises:
        InstallerError: From whichever stage failed first.
    """
    progress = progress or (lambda _msg: None)

    target = resolve_host_platform(host, releases_page=settings.releases_page)
    logger.info("Target: %s", target.describe())

    if client is None:
        client = GitHubReleaseClient.from_env(settings.api_host, settings.repository)
    tag = resolve_release_tag(config, client)

    asset_url = build_download_url(settings, target, tag)
    result = InstallResult(
        binary=settings.binary,
        target=target,
        tag=tag,
        url=asset_url.url,
        destination=config.destination_directory,
        dry_run=dry_run,
    )

    if dry_run:
        logger.info("Dry run, not installing %s", asset_url.url)
        return result

    outcome = install_artifact(asset_url, config, fs=fs, opener=opener, progress=progress)
    result.installed_path = outcome.installed_path
    result.path_advisory = path_advisory(config.destination_directory, host.search_path)
    return result

"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from relfetch.core.models import InstallConfig, PlatformTarget, ReleaseTag
"""

from relfetch.core.models.install import HostEnvironment, InstallConfig
from relfetch.core.models.platform import OsFamily, PlatformTarget
from relfetch.core.models.receipt import Receipt
from relfetch.core.models.release import (
    DownloadArtifact,
    ReleaseAssetUrl,
    ReleaseRecord,
    ReleaseTag,
)
from relfetch.core.models.settings import InstallerSettings

__all__ = [
    # release.py
    "DownloadArtifact",
    # install.py
    "HostEnvironment",
    "InstallConfig",
    # settings.py
    "InstallerSettings",
    # platform.py
    "OsFamily",
    "PlatformTarget",
    # receipt.py
    "Receipt",
    "ReleaseAssetUrl",
    "ReleaseRecord",
    "ReleaseTag",
]

"""
Installer settings — which project to install and where.

Defaults install ``trackio-tui`` from its GitHub releases. A YAML
settings file (see ``relfetch.core.config.loader``) can point the
installer at another repository or binary.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from pydantic import BaseModel, field_validator

_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


class InstallerSettings(BaseModel):
    """Project and location settings for the installer."""

    repository: str = "francescorubbo/trackio-tui"
    binary: str = "trackio-tui"
    download_host: str = "https://github.com"
    api_host: str = "https://api.github.com"
    user_dir: str = "~/.local/bin"
    system_dir: str = "/usr/local/bin"

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        if not _REPOSITORY_RE.match(value):
            raise ValueError(f"repository must look like 'owner/name', got {value!r}")
        return value

    @field_validator("download_host", "api_host")
    @classmethod
    def _check_host(cls, value: str) -> str:
        value = value.rstrip("/")
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"host must be an http(s) URL, got {value!r}")
        return value

    @field_validator("binary")
    @classmethod
    def _check_binary(cls, value: str) -> str:
        if not value or "/" in value:
            raise ValueError(f"binary must be a bare file name, got {value!r}")
        return value

    @property
    def releases_page(self) -> str:
        """Human-facing releases page, used in manual-download hints."""
        return f"{self.download_host}/{self.repository}/releases"

    def user_install_dir(self) -> Path:
        return Path(os.path.expanduser(self.user_dir))

    def system_install_dir(self) -> Path:
        return Path(os.path.expanduser(self.system_dir))

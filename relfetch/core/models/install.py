"""
Install configuration and host environment models.

``InstallConfig`` is what the option parser produces. ``HostEnvironment``
carries the few global reads (OS name, architecture, search path) so the
resolvers can be fed fixed values in tests.
"""

from __future__ import annotations

import os
import platform
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InstallConfig(BaseModel):
    """Options for one install run.

    ``explicit_version`` wins over ``include_prerelease`` whenever it is set.
    """

    model_config = ConfigDict(frozen=True)

    destination_directory: Path
    elevation_required: bool = False
    explicit_version: str | None = None
    include_prerelease: bool = False

    @field_validator("explicit_version")
    @classmethod
    def _strip_version(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("explicit version must not be empty")
        return value

    @property
    def resolution_mode(self) -> str:
        """How the release tag will be chosen: explicit, prerelease or latest."""
        if self.explicit_version is not None:
            return "explicit"
        if self.include_prerelease:
            return "prerelease"
        return "latest"


class HostEnvironment(BaseModel):
    """The parts of the host environment the installer reads."""

    model_config = ConfigDict(frozen=True)

    system: str
    machine: str
    search_path: list[str] = Field(default_factory=list)

    @classmethod
    def detect(cls) -> HostEnvironment:
        """Read the real host: ``uname -s``, ``uname -m`` and ``$PATH``."""
        raw_path = os.environ.get("PATH", "")
        return cls(
            system=platform.system(),
            machine=platform.machine(),
            search_path=[p for p in raw_path.split(os.pathsep) if p],
        )

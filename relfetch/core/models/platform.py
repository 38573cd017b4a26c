"""
Platform model — which build artifact fits the running machine.

A ``PlatformTarget`` is only ever constructed for a supported
(OS, architecture) pair; unsupported pairs never become partial targets.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OsFamily(str, Enum):
    """Operating system family as reported by ``uname -s``."""

    LINUX = "Linux"
    DARWIN = "Darwin"
    OTHER = "Other"

    @classmethod
    def from_report(cls, system: str) -> OsFamily:
        """Map an OS report to a family. Case-sensitive on purpose."""
        for member in (cls.LINUX, cls.DARWIN):
            if system == member.value:
                return member
        return cls.OTHER


class PlatformTarget(BaseModel):
    """Resolved build target for the host."""

    model_config = ConfigDict(frozen=True)

    os_family: OsFamily
    cpu_architecture: str
    target_triple: str

    def describe(self) -> str:
        return f"{self.os_family.value}/{self.cpu_architecture} ({self.target_triple})"

"""
Platform resolver — (OS report, architecture) → target triple.

The supported matrix is fixed. Anything outside it is an error;
a wrong-architecture binary is never offered as a fallback.
"""

from __future__ import annotations

import logging

from relfetch.core.errors import UnsupportedPlatformError
from relfetch.core.models.install import HostEnvironment
from relfetch.core.models.platform import OsFamily, PlatformTarget

logger = logging.getLogger(__name__)

SUPPORTED_TARGETS: dict[OsFamily, dict[str, str]] = {
    OsFamily.LINUX: {
        "x86_64": "x86_64-unknown-linux-gnu",
    },
    OsFamily.DARWIN: {
        "x86_64": "x86_64-apple-darwin",
        "arm64": "aarch64-apple-darwin",
    },
}


def supported_triples() -> list[str]:
    """Every target triple a release is expected to ship."""
    return [triple for arches in SUPPORTED_TARGETS.values() for triple in arches.values()]


def resolve_platform(
    system: str,
    machine: str,
    *,
    releases_page: str | None = None,
) -> PlatformTarget:
    """Map an OS report and architecture to a ``PlatformTarget``.

    Args:
        system: OS name as ``uname -s`` reports it (``Linux``, ``Darwin``).
        machine: Architecture as ``uname -m`` reports it.
        releases_page: Where to download manually; included in the
            unsupported-OS hint.

    Raises:
        UnsupportedPlatformError: For any pair outside the matrix.
    """
    family = OsFamily.from_report(system)
    arches = SUPPORTED_TARGETS.get(family)
    if arches is None:
        hint = f"Please download manually from {releases_page}" if releases_page else None
        raise UnsupportedPlatformError(f"Unsupported OS: {system}", hint=hint)

    triple = arches.get(machine)
    if triple is None:
        raise UnsupportedPlatformError(
            f"Unsupported architecture: {machine}",
            hint=f"Supported on {family.value}: {', '.join(sorted(arches))}",
        )

    logger.debug("Resolved %s/%s to %s", system, machine, triple)
    return PlatformTarget(os_family=family, cpu_architecture=machine, target_triple=triple)


def resolve_host_platform(
    host: HostEnvironment,
    *,
    releases_page: str | None = None,
) -> PlatformTarget:
    """``resolve_platform`` for an injected host environment."""
    return resolve_platform(host.system, host.machine, releases_page=releases_page)

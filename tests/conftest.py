"""
Shared test fixtures and configuration.

Nothing here touches the network: release queries go through
``FakeReleaseClient`` and downloads through ``FakeOpener``, which
serves in-memory tarballs.
"""

from __future__ import annotations

import io
import json
import logging
import tarfile
from pathlib import Path

import pytest

from relfetch.core.errors import TransportError
from relfetch.core.models import HostEnvironment, InstallerSettings, ReleaseRecord


def build_tarball(members: dict[str, bytes], mode: int = 0o644) -> bytes:
    """Gzipped tarball holding ``members`` (name → content)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


class FakeReleaseClient:
    """Release index double that records every call."""

    def __init__(
        self,
        latest: ReleaseRecord | None = None,
        releases: list[ReleaseRecord] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.latest = latest
        self.releases = releases or []
        self.error = error
        self.calls: list[str] = []

    def latest_release(self) -> ReleaseRecord | None:
        self.calls.append("latest")
        if self.error is not None:
            raise self.error
        return self.latest

    def list_releases(self) -> list[ReleaseRecord]:
        self.calls.append("list")
        if self.error is not None:
            raise self.error
        return list(self.releases)


class FakeOpener:
    """URL opener double: url → bytes, or an exception to raise.

    Unknown URLs answer like a missing release asset (HTTP 404).
    """

    def __init__(self, responses: dict[str, bytes | Exception] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[dict] = []

    def __call__(self, url, *, timeout, accept="*/*", token=None):
        self.calls.append({"url": url, "timeout": timeout, "accept": accept, "token": token})
        response = self.responses.get(url)
        if response is None:
            raise TransportError(f"HTTP 404 from {url}", status=404, url=url)
        if isinstance(response, Exception):
            raise response
        return io.BytesIO(response)

    @property
    def urls(self) -> list[str]:
        return [c["url"] for c in self.calls]


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch) -> Path:
    """Point $HOME at a temp dir and clear the env vars the installer reads."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "RELFETCH_CONFIG",
        "RELFETCH_LOG_LEVEL",
        "RELFETCH_LOG_FILE",
        "RELFETCH_LOG_FILE_LEVEL",
        "GITHUB_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def home(isolated_env: Path) -> Path:
    return isolated_env


@pytest.fixture
def settings() -> InstallerSettings:
    return InstallerSettings()


@pytest.fixture
def linux_host() -> HostEnvironment:
    return HostEnvironment(system="Linux", machine="x86_64", search_path=["/usr/bin", "/bin"])


@pytest.fixture
def darwin_arm_host() -> HostEnvironment:
    return HostEnvironment(system="Darwin", machine="arm64", search_path=["/usr/bin"])


@pytest.fixture
def tarball():
    return build_tarball


@pytest.fixture
def fake_client():
    return FakeReleaseClient


@pytest.fixture
def fake_opener():
    return FakeOpener


@pytest.fixture
def json_bytes():
    def _encode(payload) -> bytes:
        return json.dumps(payload).encode("utf-8")

    return _encode


@pytest.fixture(autouse=True)
def restore_root_logger():
    """``setup_logging`` rewires the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

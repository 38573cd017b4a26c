"""
Tests for the installer — placement, permissions, rollback, elevation.
"""

import os
from pathlib import Path

import pytest

from relfetch.adapters.shell.filesystem import FilesystemAdapter
from relfetch.core.errors import InstallError, TransportError, UnpackError
from relfetch.core.models import (
    InstallConfig,
    OsFamily,
    PlatformTarget,
    Receipt,
    ReleaseAssetUrl,
    ReleaseTag,
)
from relfetch.core.services.installer import build_download_url, install_artifact

LINUX = PlatformTarget(
    os_family=OsFamily.LINUX, cpu_architecture="x86_64", target_triple="x86_64-unknown-linux-gnu",
)


def _asset(tag: str | None = "v0.1.0") -> ReleaseAssetUrl:
    return ReleaseAssetUrl(
        host="https://github.com",
        repository="francescorubbo/trackio-tui",
        tag=tag,
        binary="trackio-tui",
        target_triple=LINUX.target_triple,
    )


class RecordingRunner:
    """Stands in for ``run_command``; records commands instead of running them."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.commands: list[list[str]] = []
        self.fail_on = fail_on

    def __call__(self, cmd, *, elevate=False, timeout=120, action_id=""):
        self.commands.append(list(cmd))
        if cmd[0] == self.fail_on:
            return Receipt.failure(adapter="shell", action_id=action_id, error="permission denied")
        return Receipt.success(adapter="shell", action_id=action_id)


class TestBuildDownloadUrl:
    def test_tagged(self, settings):
        url = build_download_url(settings, LINUX, ReleaseTag(value="v0.1.0", source="explicit"))
        assert url.url == (
            "https://github.com/francescorubbo/trackio-tui/releases/download/v0.1.0/"
            "trackio-tui-x86_64-unknown-linux-gnu.tar.gz"
        )

    def test_latest_alias(self, settings):
        url = build_download_url(settings, LINUX, None)
        assert "/releases/latest/download/" in url.url


class TestInstallArtifact:
    def test_installs_into_new_directory(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "home" / ".local" / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"ELF-BINARY"})})
        messages: list[str] = []

        outcome = install_artifact(
            asset, InstallConfig(destination_directory=dest), opener=opener,
            progress=messages.append,
        )

        installed = dest / "trackio-tui"
        assert outcome.installed_path == installed
        assert outcome.created_directory is True
        assert outcome.url == asset.url
        assert installed.read_bytes() == b"ELF-BINARY"
        assert os.access(installed, os.X_OK)
        assert messages == [
            "Downloading trackio-tui for x86_64-unknown-linux-gnu...",
            f"Installing to {dest}...",
        ]
        assert opener.calls[0]["accept"] == "application/octet-stream"

    def test_overwrites_existing_binary(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "bin"
        dest.mkdir()
        (dest / "trackio-tui").write_bytes(b"old")
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"new"})})

        outcome = install_artifact(asset, InstallConfig(destination_directory=dest), opener=opener)

        assert outcome.created_directory is False
        assert (dest / "trackio-tui").read_bytes() == b"new"

    def test_download_404_leaves_nothing_behind(self, tmp_path, fake_opener):
        dest = tmp_path / "fresh" / "bin"
        with pytest.raises(TransportError) as exc:
            install_artifact(
                _asset("v9.9.9"), InstallConfig(destination_directory=dest), opener=fake_opener(),
            )
        assert exc.value.status == 404
        assert not (tmp_path / "fresh").exists()

    def test_failure_keeps_preexisting_parent(self, tmp_path, fake_opener):
        parent = tmp_path / "opt"
        parent.mkdir()
        with pytest.raises(TransportError):
            install_artifact(
                _asset(), InstallConfig(destination_directory=parent / "a" / "bin"),
                opener=fake_opener(),
            )
        assert parent.is_dir()
        assert list(parent.iterdir()) == []
        assert "trackio-tui v9.9.9 for x86_64-unknown-linux-gnu" in exc.value.message
        assert "trackio-tui-x86_64-unknown-linux-gnu.tar.gz" in exc.value.hint
        assert not dest.exists()

    def test_existing_directory_is_kept_on_failure(self, tmp_path, fake_opener):
        dest = tmp_path / "bin"
        dest.mkdir()
        with pytest.raises(TransportError):
            install_artifact(_asset(), InstallConfig(destination_directory=dest), opener=fake_opener())
        assert dest.is_dir()
        assert list(dest.iterdir()) == []

    def test_missing_binary_in_archive(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"something-else": b"x"})})
        with pytest.raises(UnpackError, match="Failed to unpack trackio-tui v0.1.0"):
            install_artifact(asset, InstallConfig(destination_directory=dest), opener=opener)
        assert not dest.exists()

    def test_corrupt_archive(self, tmp_path, fake_opener):
        dest = tmp_path / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: b"<html>502 Bad Gateway</html>"})
        with pytest.raises(UnpackError):
            install_artifact(asset, InstallConfig(destination_directory=dest), opener=opener)
        assert not dest.exists()

    def test_mkdir_failure_downloads_nothing(self, tmp_path, tarball, fake_opener):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file")
        dest = blocker / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"ELF"})})

        with pytest.raises(InstallError, match="Cannot create install directory"):
            install_artifact(asset, InstallConfig(destination_directory=dest), opener=opener)
        assert opener.calls == []


class TestElevatedInstall:
    @pytest.fixture(autouse=True)
    def _sudo_available(self, monkeypatch):
        monkeypatch.setattr(
            "relfetch.adapters.shell.filesystem.needs_sudo_prefix", lambda elevate: False,
        )

    def test_runs_privileged_commands(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "usr" / "local" / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"ELF"})})
        runner = RecordingRunner()
        fs = FilesystemAdapter(elevate=True, runner=runner)

        outcome = install_artifact(
            asset,
            InstallConfig(destination_directory=dest, elevation_required=True),
            fs=fs,
            opener=opener,
        )

        target = str(dest / "trackio-tui")
        assert [c[0] for c in runner.commands] == ["mkdir", "mv", "chmod"]
        assert runner.commands[0] == ["mkdir", "-p", str(dest)]
        assert runner.commands[1][-1] == target
        assert runner.commands[2] == ["chmod", "+x", target]
        assert outcome.installed_path == Path(target)

    def test_failed_mkdir_stops_before_download(self, tmp_path, fake_opener):
        runner = RecordingRunner(fail_on="mkdir")
        opener = fake_opener()
        with pytest.raises(InstallError, match="permission denied"):
            install_artifact(
                _asset(),
                InstallConfig(destination_directory=tmp_path / "sys", elevation_required=True),
                fs=FilesystemAdapter(elevate=True, runner=runner),
                opener=opener,
            )
        assert opener.calls == []

    def test_failed_move_rolls_back_directory(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "sys"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"ELF"})})
        runner = RecordingRunner(fail_on="mv")
        with pytest.raises(InstallError, match="Cannot move trackio-tui"):
            install_artifact(
                asset,
                InstallConfig(destination_directory=dest, elevation_required=True),
                fs=FilesystemAdapter(elevate=True, runner=runner),
                opener=opener,
            )
        assert runner.commands[-1] == ["rmdir", str(dest)]

    def test_failed_move_removes_created_parents(self, tmp_path, tarball, fake_opener):
        dest = tmp_path / "opt" / "relfetch" / "bin"
        asset = _asset()
        opener = fake_opener({asset.url: tarball({"trackio-tui": b"ELF"})})
        runner = RecordingRunner(fail_on="mv")
        with pytest.raises(InstallError):
            install_artifact(
                asset,
                InstallConfig(destination_directory=dest, elevation_required=True),
                fs=FilesystemAdapter(elevate=True, runner=runner),
                opener=opener,
            )
        assert runner.commands[-3:] == [
            ["rmdir", str(dest)],
            ["rmdir", str(dest.parent)],
            ["rmdir", str(tmp_path / "opt")],
        ]

    def test_sudo_missing(self, tmp_path, fake_opener, monkeypatch):
        monkeypatch.setattr(
            "relfetch.adapters.shell.filesystem.needs_sudo_prefix", lambda elevate: elevate,
        )
        monkeypatch.setattr("relfetch.adapters.shell.filesystem.shutil.which", lambda name: None)
        with pytest.raises(InstallError, match="requires sudo"):
            install_artifact(
                _asset(),
                InstallConfig(destination_directory=tmp_path / "sys", elevation_required=True),
                opener=fake_opener(),
            )

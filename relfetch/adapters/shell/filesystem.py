"""
Filesystem adapter — directory creation, move and chmod with receipts.

Unprivileged operations use ``pathlib``/``shutil`` directly. When the
install target needs elevation the same operations go through
``sudo mkdir -p`` / ``sudo mv -f`` / ``sudo chmod +x``.
"""

from __future__ import annotations

import logging
import shutil
import stat
from pathlib import Path
from typing import Callable

from relfetch.adapters.shell.command import needs_sudo_prefix, run_command
from relfetch.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

CommandRunner = Callable[..., Receipt]

_EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


class FilesystemAdapter:
    """Filesystem operations for one install, elevated or not."""

    def __init__(self, *, elevate: bool = False, runner: CommandRunner = run_command) -> None:
        self.elevate = elevate
        self._runner = runner

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        """Elevated operations need sudo unless we already are root."""
        if not needs_sudo_prefix(self.elevate):
            return True
        return shutil.which("sudo") is not None

    def make_dir(self, target: Path) -> Receipt:
        """``mkdir -p target``."""
        if self.elevate:
            return self._runner(["mkdir", "-p", str(target)], elevate=True, action_id="mkdir")
        try:
            target.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return self._failure("mkdir", f"Cannot create {target}: {e}", target)
        return Receipt.success(
            adapter=self.name,
            action_id="mkdir",
            output=f"Directory created: {target}",
            metadata={"path": str(target)},
        )

    def remove_empty_dir(self, target: Path) -> Receipt:
        """``rmdir target``; fails (harmlessly) when it is not empty."""
        if self.elevate:
            return self._runner(["rmdir", str(target)], elevate=True, action_id="rmdir")
        try:
            target.rmdir()
        except OSError as e:
            return self._failure("rmdir", f"Cannot remove {target}: {e}", target)
        return Receipt.success(adapter=self.name, action_id="rmdir", metadata={"path": str(target)})

    def move(self, source: Path, target: Path) -> Receipt:
        """Move ``source`` to ``target``, replacing an existing file."""
        if self.elevate:
            return self._runner(["mv", "-f", str(source), str(target)], elevate=True, action_id="move")
        try:
            shutil.move(str(source), str(target))
        except OSError as e:
            return self._failure("move", f"Cannot move {source} to {target}: {e}", target)
        return Receipt.success(
            adapter=self.name,
            action_id="move",
            output=f"Moved to {target}",
            metadata={"source": str(source), "path": str(target)},
        )

    def make_executable(self, target: Path) -> Receipt:
        """``chmod +x target``: add execute bits to the current mode."""
        if self.elevate:
            return self._runner(["chmod", "+x", str(target)], elevate=True, action_id="chmod")
        try:
            mode = target.stat().st_mode
            target.chmod(mode | _EXEC_BITS)
        except OSError as e:
            return self._failure("chmod", f"Cannot chmod {target}: {e}", target)
        return Receipt.success(
            adapter=self.name,
            action_id="chmod",
            metadata={"path": str(target), "mode": oct((mode | _EXEC_BITS) & 0o7777)},
        )

    def _failure(self, action_id: str, error: str, target: Path) -> Receipt:
        logger.debug("%s failed: %s", action_id, error)
        return Receipt.failure(
            adapter=self.name,
            action_id=action_id,
            error=error,
            metadata={"path": str(target)},
        )

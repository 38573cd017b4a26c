"""
Shell command adapter — the single place ``subprocess.run`` is called.

Used for the privileged half of an install (``sudo mkdir``, ``sudo mv``,
``sudo chmod``). sudo prompts on the terminal itself; the password
never passes through this process.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time

from relfetch.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

ADAPTER_NAME = "shell"


def needs_sudo_prefix(elevate: bool) -> bool:
    """Whether a command must be wrapped in sudo. Root needs no prefix."""
    return elevate and os.geteuid() != 0


def run_command(
    cmd: list[str],
    *,
    elevate: bool = False,
    timeout: int = 120,
    action_id: str = "",
) -> Receipt:
    """Run ``cmd``, through sudo when ``elevate`` is set.

    Args:
        cmd: Command list for ``subprocess.run()``.
        elevate: Whether the command requires root.
        timeout: Seconds before giving up (includes the sudo prompt).
        action_id: Label recorded on the receipt.

    Returns:
        A Receipt; never raises for command failures.
    """
    action_id = action_id or cmd[0]

    if needs_sudo_prefix(elevate):
        if shutil.which("sudo") is None:
            return Receipt.failure(
                adapter=ADAPTER_NAME,
                action_id=action_id,
                error="This step requires root, but sudo is not available.",
                metadata={"command": cmd},
            )
        cmd = ["sudo"] + cmd

    logger.debug("Executing: %s", " ".join(cmd))
    start = time.monotonic()
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        return Receipt.failure(
            adapter=ADAPTER_NAME,
            action_id=action_id,
            error=f"Command timed out ({timeout}s): {' '.join(cmd)}",
            metadata={"command": cmd, "timeout": timeout},
        )
    except OSError as e:
        return Receipt.failure(
            adapter=ADAPTER_NAME,
            action_id=action_id,
            error=f"Cannot run {cmd[0]}: {e}",
            metadata={"command": cmd},
        )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    stdout = (result.stdout or "").strip()
    stderr = (result.stderr or "").strip()

    if result.returncode == 0:
        return Receipt.success(
            adapter=ADAPTER_NAME,
            action_id=action_id,
            output=stdout,
            duration_ms=elapsed_ms,
            metadata={"command": cmd, "return_code": 0},
        )

    return Receipt.failure(
        adapter=ADAPTER_NAME,
        action_id=action_id,
        error=stderr or f"Command exited with code {result.returncode}",
        duration_ms=elapsed_ms,
        metadata={"command": cmd, "return_code": result.returncode, "stdout": stdout},
    )

"""Post-install check: is the install directory on the search path?"""

from __future__ import annotations

import os
from pathlib import Path


def _normalise(entry: str) -> str:
    return os.path.normpath(os.path.expanduser(entry))


def is_on_search_path(directory: Path, search_path: list[str]) -> bool:
    wanted = _normalise(str(directory))
    return any(_normalise(entry) == wanted for entry in search_path if entry)


def path_advisory(directory: Path, search_path: list[str]) -> str | None:
    """Advice for adding ``directory`` to ``PATH``, or None if it is there.

    Purely informational; callers must not fail on it.
    """
    if is_on_search_path(directory, search_path):
        return None
    return (
        f"NOTE: {directory} is not in your PATH.\n"
        f'Add it with: export PATH="{directory}:$PATH"'
    )

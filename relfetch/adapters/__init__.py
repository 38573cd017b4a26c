"""Adapters — network, shell and filesystem bindings.

Public re-exports for convenient access.
"""

from relfetch.adapters.net.http import fetch_json, open_url
from relfetch.adapters.shell.command import run_command
from relfetch.adapters.shell.filesystem import FilesystemAdapter

__all__ = [
    "FilesystemAdapter",
    "fetch_json",
    "open_url",
    "run_command",
]

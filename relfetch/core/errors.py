"""
Installer errors — every terminal failure after option parsing.

Usage errors are click's business and never reach here. Everything
else is an ``InstallerError``: the CLI prints ``message`` and ``hint``
and exits with ``exit_code``. Nothing is retried.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for terminal install failures."""

    exit_code = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint

    def to_dict(self) -> dict:
        return {
            "ok": False,
            "error": self.message,
            "hint": self.hint,
            "kind": type(self).__name__,
        }


class UnsupportedPlatformError(InstallerError):
    """The host OS or architecture has no pre-built binary."""


class ReleaseNotFoundError(InstallerError):
    """The release query succeeded but yielded no usable tag."""


class TransportError(InstallerError):
    """The release host could not be reached or answered with an error."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status = status
        self.url = url


class UnpackError(InstallerError):
    """The downloaded archive was corrupt or did not contain the binary."""


class InstallError(InstallerError):
    """Creating the destination, moving or chmod-ing the binary failed."""

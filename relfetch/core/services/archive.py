"""
Archive unpacking — pull one binary out of a streamed ``.tar.gz``.

The tarball is read in streaming mode (``r|gz``) straight off the HTTP
response, so download and unpack are one pass with no archive on disk.
"""

from __future__ import annotations

import logging
import shutil
import tarfile
import zlib
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from relfetch.core.errors import UnpackError

logger = logging.getLogger(__name__)


def extract_binary(stream: BinaryIO, binary: str, workdir: Path) -> Path:
    """Extract the first regular file named ``binary`` into ``workdir``.

    The member may sit at the archive root or inside a directory; only
    its basename is matched and only the basename is used on disk.

    Raises:
        UnpackError: The stream is not a valid gzip tarball, or it holds
            no file called ``binary``.
    """
    extracted: Path | None = None
    try:
        with tarfile.open(fileobj=stream, mode="r|gz") as tar:
            for member in tar:
                if not member.isfile() or PurePosixPath(member.name).name != binary:
                    continue
                source = tar.extractfile(member)
                if source is None:
                    continue
                extracted = workdir / binary
                with source, extracted.open("wb") as out:
                    shutil.copyfileobj(source, out)
                extracted.chmod(member.mode & 0o755 | 0o600)
                logger.debug("Extracted %s (%d bytes)", member.name, member.size)
                break
    except (tarfile.TarError, EOFError, zlib.error, OSError) as e:
        raise UnpackError(f"Corrupt or unreadable archive: {e}") from e

    if extracted is None:
        raise UnpackError(f"Archive does not contain '{binary}'")
    return extracted

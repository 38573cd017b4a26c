"""
HTTP adapter — the only place the installer talks to the network.

Thin wrapper over ``urllib.request``: sets headers, applies a fixed
timeout and turns every transport failure into ``TransportError``.
"""

from __future__ import annotations

import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Any, BinaryIO, Protocol

from relfetch import __version__
from relfetch.core.errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = f"relfetch/{__version__} (+https://github.com/francescorubbo/trackio-tui)"

# Fixed timeouts in seconds, not user-configurable
API_TIMEOUT = 30
DOWNLOAD_TIMEOUT = 300


class UrlOpener(Protocol):
    """Callable that opens a URL and returns a readable binary stream."""

    def __call__(
        self,
        url: str,
        *,
        timeout: int,
        accept: str = "*/*",
        token: str | None = None,
    ) -> BinaryIO: ...


def open_url(
    url: str,
    *,
    timeout: int,
    accept: str = "*/*",
    token: str | None = None,
) -> BinaryIO:
    """Open ``url`` and return the response stream.

    Raises:
        TransportError: On a non-success status, timeout or connection error.
            ``status`` is set when the server answered.
    """
    headers = {"User-Agent": USER_AGENT, "Accept": accept}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    request = urllib.request.Request(url, headers=headers)
    logger.debug("GET %s", url)
    try:
        return urllib.request.urlopen(request, timeout=timeout)  # nosec - https release host
    except urllib.error.HTTPError as e:
        e.close()
        raise TransportError(
            f"HTTP {e.code} from {url}", status=e.code, url=url,
        ) from e
    except urllib.error.URLError as e:
        raise TransportError(f"Cannot reach {url}: {e.reason}", url=url) from e
    except (socket.timeout, TimeoutError) as e:
        raise TransportError(f"Timed out after {timeout}s: {url}", url=url) from e
    except OSError as e:
        raise TransportError(f"Network error for {url}: {e}", url=url) from e


def fetch_json(
    url: str,
    *,
    opener: UrlOpener = open_url,
    timeout: int = API_TIMEOUT,
    token: str | None = None,
) -> Any:
    """GET ``url`` and decode the body as JSON.

    Raises:
        TransportError: On any transport failure or a malformed body.
    """
    with opener(url, timeout=timeout, accept="application/vnd.github+json", token=token) as resp:
        try:
            raw = resp.read()
        except OSError as e:
            raise TransportError(f"Failed reading response from {url}: {e}", url=url) from e

    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise TransportError(f"Malformed response body from {url}: {e}", url=url) from e

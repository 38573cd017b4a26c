"""
Release index client — GitHub releases API.

Two views are used: ``/releases`` (the full index, newest first) and
``/releases/latest`` (newest non-draft, non-prerelease release).
Responses are parsed into ``ReleaseRecord`` models; callers read
``tag_name`` from them rather than scraping the body.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

from pydantic import ValidationError

from relfetch.adapters.net.http import API_TIMEOUT, UrlOpener, fetch_json, open_url
from relfetch.core.errors import TransportError
from relfetch.core.models.release import ReleaseRecord

logger = logging.getLogger(__name__)

# Env var holding an optional API token (raises the rate limit)
TOKEN_ENV_VAR = "GITHUB_TOKEN"

# First page is enough: the index is newest first
DEFAULT_PAGE_SIZE = 10


class ReleaseClient(Protocol):
    """What the release resolver needs from a release index."""

    def latest_release(self) -> ReleaseRecord | None: ...

    def list_releases(self) -> list[ReleaseRecord]: ...


class GitHubReleaseClient:
    """Query a repository's releases through the GitHub REST API."""

    def __init__(
        self,
        api_host: str,
        repository: str,
        *,
        token: str | None = None,
        opener: UrlOpener = open_url,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._base = f"{api_host.rstrip('/')}/repos/{repository}/releases"
        self._token = token
        self._opener = opener
        self._page_size = page_size

    @classmethod
    def from_env(cls, api_host: str, repository: str, **kwargs) -> GitHubReleaseClient:
        """Build a client, picking up ``$GITHUB_TOKEN`` when set."""
        token = os.environ.get(TOKEN_ENV_VAR, "").strip() or None
        return cls(api_host, repository, token=token, **kwargs)

    @property
    def latest_url(self) -> str:
        return f"{self._base}/latest"

    @property
    def index_url(self) -> str:
        return f"{self._base}?per_page={self._page_size}"

    def latest_release(self) -> ReleaseRecord | None:
        """Return the latest stable release, or None if there is none.

        The API answers 404 on this view when a repository has no stable
        release; that is "nothing found", not a transport failure.
        """
        try:
            payload = self._get(self.latest_url)
        except TransportError as e:
            if e.status == 404:
                logger.info("No latest stable release at %s", self.latest_url)
                return None
            raise

        if not isinstance(payload, dict):
            raise TransportError(
                f"Malformed response body from {self.latest_url}: expected an object",
                url=self.latest_url,
            )
        return self._parse(payload, self.latest_url)

    def list_releases(self) -> list[ReleaseRecord]:
        """Return the first page of the release index, in API order."""
        payload = self._get(self.index_url)
        if not isinstance(payload, list):
            raise TransportError(
                f"Malformed response body from {self.index_url}: expected a list",
                url=self.index_url,
            )
        releases = [self._parse(entry, self.index_url) for entry in payload]
        logger.debug("Release index returned %d entries", len(releases))
        return releases

    def _get(self, url: str):
        return fetch_json(url, opener=self._opener, timeout=API_TIMEOUT, token=self._token)

    @staticmethod
    def _parse(entry: object, url: str) -> ReleaseRecord:
        if not isinstance(entry, dict):
            raise TransportError(f"Malformed release entry from {url}", url=url)
        try:
            return ReleaseRecord.model_validate(entry)
        except ValidationError as e:
            raise TransportError(f"Malformed release entry from {url}: {e}", url=url) from e

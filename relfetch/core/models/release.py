"""
Release models — what the release index says, and where to fetch from.

``ReleaseRecord`` is a structured view of one entry of the GitHub
releases API. ``ReleaseTag`` is the single tag the resolver settles on.
``ReleaseAssetUrl`` builds the download URL from typed parts instead of
string interpolation at call sites.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import BinaryIO, Literal
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator

_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

ARCHIVE_SUFFIX = ".tar.gz"


class ReleaseRecord(BaseModel):
    """One release as returned by the releases API. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    tag_name: str | None = None
    name: str | None = None
    prerelease: bool = False
    draft: bool = False
    html_url: str | None = None


class ReleaseTag(BaseModel):
    """A resolved, non-empty release tag."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(min_length=1)
    source: Literal["explicit", "latest", "prerelease"]

    def __str__(self) -> str:
        return self.value


class ReleaseAssetUrl(BaseModel):
    """Download URL for a release archive.

    ``tag=None`` selects the provider's ``releases/latest/download`` alias.
    """

    model_config = ConfigDict(frozen=True)

    host: str
    repository: str
    tag: str | None = None
    binary: str
    target_triple: str

    @field_validator("host")
    @classmethod
    def _check_host(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("https://", "http://")):
            raise ValueError(f"host must be an http(s) URL, got {value!r}")
        return value

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        value = value.strip()
        if not _REPOSITORY_RE.match(value):
            raise ValueError(f"repository must look like 'owner/name', got {value!r}")
        return value

    @field_validator("tag")
    @classmethod
    def _check_tag(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("tag must not be empty")
        return value

    @field_validator("binary", "target_triple")
    @classmethod
    def _check_segment(cls, value: str) -> str:
        value = value.strip()
        if not value or "/" in value:
            raise ValueError(f"invalid path segment {value!r}")
        return value

    @property
    def archive_name(self) -> str:
        return f"{self.binary}-{self.target_triple}{ARCHIVE_SUFFIX}"

    @property
    def url(self) -> str:
        base = f"{self.host}/{self.repository}/releases"
        if self.tag is None:
            return f"{base}/latest/download/{self.archive_name}"
        return f"{base}/download/{quote(self.tag, safe='')}/{self.archive_name}"

    def __str__(self) -> str:
        return self.url


@dataclass
class DownloadArtifact:
    """An opened archive download. Consumed once, then closed."""

    url: str
    stream: BinaryIO

    def close(self) -> None:
        self.stream.close()

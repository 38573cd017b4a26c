"""
Release resolver — settle on exactly one release tag.

    explicit version  →  used verbatim, no network
    --pre             →  first non-draft entry of the release index
    otherwise         →  the latest-stable view

An empty answer is never a tag: it becomes ``ReleaseNotFoundError``.
"""

from __future__ import annotations

import logging

from relfetch.core.errors import ReleaseNotFoundError
from relfetch.core.models.install import InstallConfig
from relfetch.core.models.release import ReleaseRecord, ReleaseTag
from relfetch.core.services.release_client import ReleaseClient

logger = logging.getLogger(__name__)

RETRY_HINT = "Try --pre to include pre-releases, or --version <tag> to pin a release."


def resolve_release_tag(config: InstallConfig, client: ReleaseClient) -> ReleaseTag:
    """Resolve the tag to install.

    Args:
        config: Parsed install options.
        client: Release index; not called at all for a pinned version.

    Returns:
        A non-empty ReleaseTag.

    Raises:
        ReleaseNotFoundError: The query succeeded but gave no usable tag.
        TransportError: The query itself failed (propagated, never retried).
    """
    if config.explicit_version is not None:
        logger.info("Using pinned version %s", config.explicit_version)
        return ReleaseTag(value=config.explicit_version, source="explicit")

    if config.include_prerelease:
        # Index order is the provider's newest-first order; no re-sorting.
        # Drafts only show up for tokens with push access and have no public assets.
        record = next((r for r in client.list_releases() if not r.draft), None)
        source = "prerelease"
    else:
        record = client.latest_release()
        source = "latest"

    tag = _tag_of(record)
    if not tag:
        raise ReleaseNotFoundError(
            "No release found",
            hint=None if config.include_prerelease else RETRY_HINT,
        )

    logger.info("Resolved %s release %s", source, tag)
    return ReleaseTag(value=tag, source=source)


def _tag_of(record: ReleaseRecord | None) -> str:
    if record is None or record.tag_name is None:
        return ""
    return record.tag_name.strip()

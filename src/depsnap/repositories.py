"""Collect the repositories relevant to reproducible resolution."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from depsnap.host import HostRepository
from depsnap.model import RepositoryDescriptor

logger = logging.getLogger(__name__)

EMBEDDED_REPOSITORY_NAME = "Embedded Kotlin Repository"
LOCAL_REPOSITORY_NAME = "MavenLocal"

# Only these can serve remote artifacts by URL.
_REMOTE_KINDS = {"maven"}


def collect_repositories(
    repositories: Iterable[HostRepository], ignore_local: bool
) -> tuple[RepositoryDescriptor, ...]:
    """Return descriptors for the remote repositories, in declaration order."""
    collected: list[RepositoryDescriptor] = []
    for repo in repositories:
        if repo.kind not in _REMOTE_KINDS or not repo.url:
            continue
        if repo.name == EMBEDDED_REPOSITORY_NAME:
            continue
        if ignore_local and repo.name == LOCAL_REPOSITORY_NAME:
            logger.debug("Ignoring local repository %s", repo.url)
            continue
        urls = (str(repo.url), *(str(u) for u in repo.artifact_urls))
        collected.append(RepositoryDescriptor(urls=urls))
    return tuple(collected)

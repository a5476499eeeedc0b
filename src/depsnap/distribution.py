"""Describe the build tool distribution pinned by the wrapper."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import requests

from depsnap.config import HarvestConfig
from depsnap.errors import NativeVersionNotFoundError
from depsnap.host import HostBuild, HostWrapper
from depsnap.model import DistributionInfo

logger = logging.getLogger(__name__)

NATIVE_PLATFORM_JAR_RE = re.compile(r"native-platform-([\d.]+)\.jar")

# Wrappers of older tool versions have no place to store a checksum.
_CHECKSUM_PROPERTY_SINCE = (4, 5)


def _version_tuple(version: str) -> tuple[int, ...]:
    """Leading numeric components of a version string ("4.10-rc-1" -> (4, 10))."""
    parts: list[int] = []
    for part in re.split(r"[.-]", version):
        if not part.isdigit():
            break
        parts.append(int(part))
    return tuple(parts)


def fetch_distribution_sha256(
    url: str, timeout: float | None = None, retries: int = 0
) -> str:
    """Download ``<url>.sha256`` and return the body verbatim.

    With the default policy a single attempt is made and any network error
    propagates.
    """
    checksum_url = f"{url}.sha256"
    attempt = 0
    while True:
        attempt += 1
        try:
            response = requests.get(checksum_url, timeout=timeout)
            response.raise_for_status()
            return response.text
        except requests.RequestException as e:
            if attempt > retries:
                raise
            logger.warning(
                "Fetching %s failed (attempt %d of %d): %s",
                checksum_url,
                attempt,
                retries + 1,
                e,
            )


def distribution_sha256(
    wrapper: HostWrapper, gradle_version: str, config: HarvestConfig
) -> str:
    """Prefer the checksum stored on the wrapper, else fetch it."""
    if _version_tuple(gradle_version) >= _CHECKSUM_PROPERTY_SINCE:
        if wrapper.distribution_sha256_sum:
            return wrapper.distribution_sha256_sum
    logger.debug("No stored checksum; fetching for %s", wrapper.distribution_url)
    return fetch_distribution_sha256(
        wrapper.distribution_url,
        timeout=config.checksum_timeout,
        retries=config.checksum_retries,
    )


def native_platform_version(gradle_home_dir: Path | None) -> str:
    """Version of the native-platform library shipped in ``<home>/lib``."""
    lib_dir = gradle_home_dir / "lib" if gradle_home_dir is not None else None
    if lib_dir is not None and lib_dir.is_dir():
        for jar in sorted(lib_dir.iterdir(), key=lambda p: p.name):
            m = NATIVE_PLATFORM_JAR_RE.fullmatch(jar.name)
            if m:
                return m.group(1)

    raise NativeVersionNotFoundError(
        f"Failed to find native-platform jar in {gradle_home_dir}.\n\n"
        "The distribution is either corrupt or too old to be supported."
    )


def distribution_info(build: HostBuild, config: HarvestConfig) -> DistributionInfo:
    wrapper = build.wrapper
    return DistributionInfo(
        version=wrapper.gradle_version,
        type=wrapper.distribution_type.lower(),
        url=wrapper.distribution_url,
        sha256=distribution_sha256(wrapper, build.gradle_version, config),
        native_version=native_platform_version(build.gradle_home_dir),
    )

"""Startup switches: explicit configurations, local repository, checksum fetch."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path

from depsnap.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIGURATIONS_PROPERTY = "depsnap.configurations"
IGNORE_LOCAL_PROPERTY = "depsnap.ignoreMavenLocal"
CHECKSUM_TIMEOUT_PROPERTY = "depsnap.checksumTimeout"
CHECKSUM_RETRIES_PROPERTY = "depsnap.checksumRetries"

_ENV_PROPERTIES = {
    "DEPSNAP_CONFIGURATIONS": CONFIGURATIONS_PROPERTY,
    "DEPSNAP_IGNORE_MAVEN_LOCAL": IGNORE_LOCAL_PROPERTY,
    "DEPSNAP_CHECKSUM_TIMEOUT": CHECKSUM_TIMEOUT_PROPERTY,
    "DEPSNAP_CHECKSUM_RETRIES": CHECKSUM_RETRIES_PROPERTY,
}

# Keys accepted in [tool.depsnap] / .depsnap.toml
_TOML_KEYS = {
    "configurations": CONFIGURATIONS_PROPERTY,
    "ignore-maven-local": IGNORE_LOCAL_PROPERTY,
    "checksum-timeout": CHECKSUM_TIMEOUT_PROPERTY,
    "checksum-retries": CHECKSUM_RETRIES_PROPERTY,
}


@dataclass(frozen=True)
class HarvestConfig:
    """Switches consulted once, when the extraction plugin is applied."""

    configurations: tuple[str, ...] = ()  # empty: every resolvable configuration
    ignore_local: bool = False
    checksum_timeout: float | None = None  # None: wait forever
    checksum_retries: int = 0

    @classmethod
    def from_properties(
        cls, properties: Mapping[str, str], base: HarvestConfig | None = None
    ) -> HarvestConfig:
        """Overlay string-valued *properties* on *base*."""
        config = base or cls()
        changes: dict = {}

        if CONFIGURATIONS_PROPERTY in properties:
            changes["configurations"] = _split_names(properties[CONFIGURATIONS_PROPERTY])
        if IGNORE_LOCAL_PROPERTY in properties:
            changes["ignore_local"] = properties[IGNORE_LOCAL_PROPERTY] == "true"
        if CHECKSUM_TIMEOUT_PROPERTY in properties:
            changes["checksum_timeout"] = _parse_timeout(
                properties[CHECKSUM_TIMEOUT_PROPERTY]
            )
        if CHECKSUM_RETRIES_PROPERTY in properties:
            changes["checksum_retries"] = _parse_retries(
                properties[CHECKSUM_RETRIES_PROPERTY]
            )

        return replace(config, **changes)


def _split_names(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


def _parse_timeout(value: str) -> float | None:
    if not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise ConfigError(f"{CHECKSUM_TIMEOUT_PROPERTY} must be a number, got {value!r}")
    if timeout <= 0:
        raise ConfigError(f"{CHECKSUM_TIMEOUT_PROPERTY} must be positive, got {value!r}")
    return timeout


def _parse_retries(value: str) -> int:
    try:
        retries = int(value)
    except ValueError:
        raise ConfigError(f"{CHECKSUM_RETRIES_PROPERTY} must be an integer, got {value!r}")
    if retries < 0:
        raise ConfigError(f"{CHECKSUM_RETRIES_PROPERTY} must not be negative, got {value!r}")
    return retries


def environment_properties(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Translate DEPSNAP_* environment variables into property names."""
    environ = os.environ if environ is None else environ
    return {prop: environ[var] for var, prop in _ENV_PROPERTIES.items() if var in environ}


def read_project_properties(project_dir: Path) -> dict[str, str]:
    """Read switches from .depsnap.toml or [tool.depsnap] in pyproject.toml."""
    import tomllib

    table: dict | None = None

    depsnap_toml = project_dir / ".depsnap.toml"
    if depsnap_toml.exists():
        try:
            with open(depsnap_toml, "rb") as f:
                table = tomllib.load(f).get("depsnap")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", depsnap_toml, e)

    pyproject = project_dir / "pyproject.toml"
    if table is None and pyproject.exists():
        try:
            with open(pyproject, "rb") as f:
                table = tomllib.load(f).get("tool", {}).get("depsnap")
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.debug("Could not read %s: %s", pyproject, e)

    if not isinstance(table, dict):
        return {}

    properties: dict[str, str] = {}
    for key, prop in _TOML_KEYS.items():
        if key not in table:
            continue
        value = table[key]
        if isinstance(value, list):
            value = ",".join(str(v) for v in value)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        properties[prop] = str(value)
    return properties


def load_config(
    project_dir: Path | None = None,
    properties: Mapping[str, str] | None = None,
) -> HarvestConfig:
    """Merge project file, environment and explicit *properties*, in that order."""
    merged: dict[str, str] = {}
    if project_dir is not None:
        merged.update(read_project_properties(project_dir))
    merged.update(environment_properties())
    if properties:
        merged.update(properties)

    config = HarvestConfig.from_properties(merged)
    logger.debug("Config: %s", config)
    return config

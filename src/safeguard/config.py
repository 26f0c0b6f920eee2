"""Safeguard settings, layered from several sources.

Later layers win: built-in defaults, then the first ``.safeguard.toml``
found (or ``~/.config/safeguard/config.toml``), then ``SAFEGUARD_*``
environment variables, then flags given on the command line.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".safeguard.toml"
CONFIG_SEARCH_PATHS = [Path.cwd, lambda: Path.home() / ".config" / "safeguard"]
GLOBAL_CONFIG = Path("~/.config/safeguard/config.toml")


class StorageConfig(BaseModel):
    """[storage] section."""

    directory: str = "./.safeguard"


class AnalysisConfig(BaseModel):
    """[analysis] section."""

    media_timeout: float = Field(default=10.0, gt=0)
    heuristic_media: bool = True


class ModerationConfig(BaseModel):
    """[moderation] section."""

    default_moderator: str = "Moderator"
    recent_log_limit: int = Field(default=5, ge=1)


class SafeguardConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    moderation: ModerationConfig = Field(default_factory=ModerationConfig)

    @property
    def storage_dir(self) -> Path:
        return Path(self.storage.directory).expanduser()


# (section, field, converter) for each environment variable and CLI flag.
_ENV_FIELDS: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "SAFEGUARD_STORAGE_DIR": ("storage", "directory", str),
    "SAFEGUARD_MODERATOR": ("moderation", "default_moderator", str),
    "SAFEGUARD_MEDIA_TIMEOUT": ("analysis", "media_timeout", float),
}

_CLI_FIELDS: dict[str, tuple[str, str]] = {
    "storage_dir": ("storage", "directory"),
    "media_timeout": ("analysis", "media_timeout"),
}


def _resolve(base: Path | Callable[[], Path]) -> Path:
    return base() if callable(base) else base


def find_config_file() -> Path | None:
    """First config file on the search path, or None."""
    for base in CONFIG_SEARCH_PATHS:
        candidate = _resolve(base) / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    global_path = GLOBAL_CONFIG.expanduser()
    return global_path if global_path.is_file() else None


def load_config(path: str | Path | None = None) -> SafeguardConfig:
    """Build the effective configuration.

    An explicit ``path`` replaces the file search.  Unreadable files and
    values that fail validation are logged and replaced by defaults
    rather than aborting the command.
    """
    source = Path(path) if path is not None else find_config_file()
    raw: dict[str, Any] = {}
    if source is not None:
        if source.is_file():
            raw = _read_toml(source)
            logger.debug("Read settings from %s", source)
        else:
            logger.warning("Config file not found: %s", source)

    try:
        config = SafeguardConfig.model_validate(raw)
    except ValueError as exc:
        logger.warning("Invalid configuration, using defaults: %s", exc)
        config = SafeguardConfig()

    return _overlay_env(config)


def merge_cli_overrides(config: SafeguardConfig, **flags: object) -> SafeguardConfig:
    """Return a copy of ``config`` with every non-None known flag applied."""
    merged = config.model_dump()
    for name, value in flags.items():
        target = _CLI_FIELDS.get(name)
        if target is None or value is None:
            continue
        section, key = target
        merged[section][key] = str(value) if isinstance(value, Path) else value
    return SafeguardConfig.model_validate(merged)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _overlay_env(config: SafeguardConfig) -> SafeguardConfig:
    merged = config.model_dump()
    for var, (section, key, convert) in _ENV_FIELDS.items():
        raw = os.environ.get(var)
        if raw is None:
            continue
        try:
            merged[section][key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring unusable %s=%r", var, raw)
    try:
        return SafeguardConfig.model_validate(merged)
    except ValueError as exc:
        logger.warning("Invalid environment overrides, ignoring them: %s", exc)
        return config

"""Configuration for themectx.

Values are resolved with the priority CLI > environment > ``themectx.toml``
in the theme root > defaults. The TOML file uses a ``[themectx]`` table::

    [themectx]
    max_workers = 4
    log_level = "DEBUG"

    [[themectx.stem_overrides]]
    stems = ["predictive-search", "predictive_search"]
    context_key = "predictive_search"

    [[themectx.path_overrides]]
    segment = "templates/metaobject/"
    context_key = "metaobject"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
import logging
import tomllib

from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from themectx.discovery.overrides import (
    DEFAULT_PATH_OVERRIDES,
    DEFAULT_STEM_OVERRIDES,
    PathOverride,
    StemOverride,
)
from themectx.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "themectx.toml"
CONFIG_TABLE = "themectx"


class ThemeContextConfig(BaseModel):
    """Configuration for context discovery and completion."""

    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Threads used for per-file scans (default: min(8, cpu count))",
    )

    context_map_path: Path | None = Field(
        default=None,
        description="Context map JSON; the bundled map is used when unset",
    )

    knowledge_base_path: Path | None = Field(
        default=None,
        description="Object knowledge base JSON; the bundled one is used when unset",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI",
    )

    stem_overrides: list[StemOverride] = Field(
        default_factory=lambda: list(DEFAULT_STEM_OVERRIDES),
        description="Contexts always added for reserved file stems",
    )

    path_overrides: list[PathOverride] = Field(
        default_factory=lambda: list(DEFAULT_PATH_OVERRIDES),
        description="Manifest directories collapsed onto one context key",
    )


class ThemeContextSettings(BaseSettings):
    """Settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="THEMECTX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_workers: int | None = Field(
        default=None,
        description="Worker threads (THEMECTX_MAX_WORKERS)",
    )

    context_map_path: Path | None = Field(
        default=None,
        description="Context map path (THEMECTX_CONTEXT_MAP_PATH)",
    )

    knowledge_base_path: Path | None = Field(
        default=None,
        description="Knowledge base path (THEMECTX_KNOWLEDGE_BASE_PATH)",
    )

    log_level: str | None = Field(
        default=None,
        description="Log level (THEMECTX_LOG_LEVEL)",
    )


def _load_config_file(path: Path) -> dict[str, Any]:
    """Load the ``[themectx]`` table from a TOML file"""
    if not path.exists():
        return {}
    if path.suffix != ".toml":
        logger.warning("Unsupported config format: %s", path)
        return {}

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle).get(CONFIG_TABLE, {})
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read {path}: {e}") from e


def _resolve_relative(values: dict[str, Any], base: Path) -> dict[str, Any]:
    """Make file paths in a config file relative to the file's directory."""
    for key in ("context_map_path", "knowledge_base_path"):
        value = values.get(key)
        if value and not Path(value).is_absolute():
            values[key] = base / value
    return values


def load_config(
    *,
    theme_root: Path | None = None,
    config_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> ThemeContextConfig:
    """Load configuration following priority: CLI > env > config file > defaults"""

    selected_path = config_path
    if selected_path is None and theme_root is not None:
        candidate = theme_root / CONFIG_FILENAME
        if candidate.exists():
            selected_path = candidate

    values: dict[str, Any] = {}
    if selected_path:
        values = _resolve_relative(_load_config_file(selected_path), selected_path.parent)

    env_overrides = ThemeContextSettings().model_dump(exclude_none=True)
    values.update(env_overrides)
    values.update({k: v for k, v in (cli_overrides or {}).items() if v is not None})

    try:
        return ThemeContextConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

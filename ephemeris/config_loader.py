"""ephemeris.config_loader

Configuration loader for ephemeris.

- Reads YAML via PyYAML ``safe_load`` (JSON documents parse as YAML too).
- Exposes a typed dataclass `Config` and a `load_config()` helper that accepts
  an optional path override.
- Environment variables override file values.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigError
from .expander import DEFAULT_MAX_OCCURRENCES_PER_RULE
from .logging_config import LEVEL_NAMES

logger = logging.getLogger(__name__)

ENV_MAX_OCCURRENCES = "EPHEMERIS_MAX_OCCURRENCES"
ENV_LOG_LEVEL = "EPHEMERIS_LOG_LEVEL"


@dataclass
class Config:
    """Typed configuration for ephemeris.

    Fields:
        max_occurrences_per_rule: cap on occurrences produced by one rule per view
        log_level: logging level name
        debug: enable debug logging for ephemeris modules
    """

    max_occurrences_per_rule: int = DEFAULT_MAX_OCCURRENCES_PER_RULE
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Config:
        """Create Config from a plain mapping, applying defaults and validation.

        Numeric-like values are coerced to int, ``max_occurrences_per_rule`` is
        raised to at least 1 and unknown log levels fall back to INFO. Each
        coercion logs a warning.
        """
        if data is None:
            data = {}

        raw_max = data.get("max_occurrences_per_rule", DEFAULT_MAX_OCCURRENCES_PER_RULE)
        try:
            max_occurrences = int(raw_max)
        except (TypeError, ValueError):
            logger.warning(
                "Config max_occurrences_per_rule=%r is not an int; using default %d",
                raw_max,
                DEFAULT_MAX_OCCURRENCES_PER_RULE,
            )
            max_occurrences = DEFAULT_MAX_OCCURRENCES_PER_RULE
        if max_occurrences < 1:
            logger.warning("max_occurrences_per_rule %d below minimum; coercing to 1", max_occurrences)
            max_occurrences = 1

        log_level = data.get("log_level", "INFO")
        log_level = str(log_level).upper() if log_level is not None else "INFO"
        if log_level not in LEVEL_NAMES:
            logger.warning("Config log_level=%r is not a known level; using INFO", log_level)
            log_level = "INFO"

        debug = data.get("debug", False)
        if isinstance(debug, str):
            debug = debug.strip().lower() in ("1", "true", "yes", "on")

        return cls(
            max_occurrences_per_rule=max_occurrences,
            log_level=log_level,
            debug=bool(debug),
        )


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay environment variables onto loaded config values."""
    merged = dict(data)
    env_max = os.getenv(ENV_MAX_OCCURRENCES)
    if env_max:
        merged["max_occurrences_per_rule"] = env_max
    env_level = os.getenv(ENV_LOG_LEVEL)
    if env_level:
        merged["log_level"] = env_level
    return merged


def _load_yaml(path: Path) -> Any:
    """Load a YAML document, normalizing empty files to an empty mapping."""
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config file {path}", {"error": str(exc)}) from exc
    if loaded is None:
        return {}
    return loaded


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file and return a Config instance.

    Args:
        path: Optional path to the config file. If not provided the default is
              ./ephemeris.yaml (relative to current working dir).

    Returns:
        Config dataclass instance with values from file, environment or defaults.

    Behavior:
    - If file is missing: returns defaults (environment overrides still apply).
    - If file exists but top-level is not a mapping: raises ConfigError.
    """
    p = Path(path) if path else Path.cwd() / "ephemeris.yaml"
    logger.debug("Attempting to load config from %s", p)
    if not p.exists():
        logger.info("Config file %s not found; using defaults", p)
        return Config.from_dict(_apply_env_overrides({}))

    raw = _load_yaml(p)
    if not isinstance(raw, dict):
        logger.warning("Config file %s parsed but top-level is not a mapping: %r", p, raw)
        raise ConfigError("Config file must contain a mapping at top level", {"path": str(p)})
    cfg = Config.from_dict(_apply_env_overrides(raw))
    logger.info("Loaded configuration from %s", p)
    logger.debug("Configuration values: %s", cfg)
    return cfg

"""
settings.py - Runtime configuration for proofdesk

Values are resolved in three layers, later layers winning:
built-in defaults, an optional YAML file (``proofdesk.yaml``), then
``PROOFDESK_*`` environment variables (``.env`` is honoured).
"""

from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .paths import CONFIG_FILE, HISTORY_FILE
from .logging_helper import get_logger

load_dotenv()

log = get_logger()

DEFAULT_MODEL = "gpt-4o-mini"

# env var → (field, parser)
_ENV_OVERRIDES = {
    "PROOFDESK_MODEL": ("model", str),
    "PROOFDESK_LANGUAGE": ("language", str),
    "PROOFDESK_HISTORY_PATH": ("history_path", pathlib.Path),
    "PROOFDESK_STALE_THRESHOLD": ("stale_threshold", lambda v: None if v.lower() in {"", "none", "any"} else int(v)),
    "PROOFDESK_MAX_RETRIES": ("max_retries", int),
    "PROOFDESK_TEMPERATURE": ("temperature", float),
}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Safe to share; never mutated after loading."""

    model: str = DEFAULT_MODEL
    language: str = "Khmer"
    history_path: pathlib.Path = HISTORY_FILE
    history_capacity: int = 10
    # None: any edit invalidates the active corrections
    stale_threshold: Optional[int] = 5
    max_retries: int = 3
    initial_delay: float = 2.0
    temperature: float = 0.2
    max_tokens: int = 4096


def _coerce(name: str, value: Any) -> Any:
    if name == "history_path" and value is not None:
        return pathlib.Path(value).expanduser()
    return value


def load_settings(config_path: Optional[pathlib.Path] = None,
                  env: Optional[Dict[str, str]] = None) -> Settings:
    """Build a Settings object from defaults, YAML and the environment.

    Args:
        config_path: YAML file to read; defaults to ``CONFIG_FILE`` when present
        env: Mapping used for overrides (``os.environ`` by default)

    Returns:
        The resolved Settings

    Raises:
        ValueError: If the YAML file is not a mapping, names an unknown key,
            or an override cannot be parsed
    """
    env = os.environ if env is None else env
    settings = Settings()
    known = {f.name for f in fields(Settings)}

    path = config_path or (CONFIG_FILE if CONFIG_FILE.exists() else None)
    if path is not None:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")
        settings = replace(settings, **{k: _coerce(k, v) for k, v in data.items()})
        log.debug("Loaded config from %s", path)

    overrides = {}
    for var, (name, parse) in _ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None:
            continue
        try:
            overrides[name] = parse(raw.strip())
        except ValueError as e:
            raise ValueError(f"Invalid value for {var}: {raw!r}") from e
    if overrides:
        settings = replace(settings, **overrides)

    return settings

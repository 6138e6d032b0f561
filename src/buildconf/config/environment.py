"""Build flags taken from the process environment and an optional ``.env`` file."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from dotenv import dotenv_values

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}


def read_environment(dotenv_path: Optional[Path] = None) -> dict[str, str]:
    """
    Snapshot the environment, layering the process environment over ``dotenv_path``.

    ``os.environ`` is never modified.
    """
    environ: dict[str, str] = {}
    if dotenv_path is not None:
        if dotenv_path.exists():
            environ.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
        else:
            logger.debug("No .env file found. path=%s", dotenv_path)
    environ.update(os.environ)
    return environ


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return True
    if normalized in _FALSE:
        return False
    raise ValueError(f"Environment variable {name} must be a boolean, got: {value!r}")


def flags_from_environment(environ: Mapping[str, str], prefix: str) -> dict[str, Any]:
    """Read ``<prefix>DEBUG``, ``<prefix>VERBOSE`` and ``<prefix>LOG_LEVEL``."""
    flags: dict[str, Any] = {}
    for key in ("debug", "verbose"):
        name = f"{prefix}{key.upper()}"
        if name in environ:
            flags[key] = _parse_bool(name, environ[name])
    name = f"{prefix}LOG_LEVEL"
    if environ.get(name):
        flags["log_level"] = environ[name].strip().lower()
    return flags


def apply_environment_flags(config: MutableMapping[str, Any], environ: Mapping[str, str], prefix: str) -> None:
    """
    Fill ``config["flags"]`` from the environment.

    Flags already present on ``config`` win over the environment. The flags mapping
    is replaced rather than updated in place, so the caller's inline config is left
    untouched.
    """
    env_flags = flags_from_environment(environ, prefix)
    if not env_flags:
        return
    current = config.get("flags")
    if current is None:
        current = {}
    if not isinstance(current, Mapping):
        raise TypeError(f"Configuration flags must be a mapping, got: {type(current).__name__}")
    config["flags"] = {**env_flags, **current}
    logger.debug("Applied environment flags. prefix=%s flags=%s", prefix, sorted(env_flags))

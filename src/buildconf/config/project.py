"""Default lookup of the type-checking project file (``pyrightconfig.json``)."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from buildconf.config.models import LoadConfigInit, ProjectConfigResults, ValidatedConfig
from buildconf.diagnostics import build_error
from buildconf.system.interfaces import CompilerSystem
from buildconf.system.paths import resolve_path

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE_NAME = "pyrightconfig.json"

_LIST_KEYS = ("files", "include", "exclude")


def _as_str_list(value: Any, key: str, path: str, results: ProjectConfigResults) -> Optional[list[str]]:
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        err = build_error(results.diagnostics)
        err.header = "Invalid Project Configuration"
        err.message_text = f'"{key}" in "{path}" must be a list of strings.'
        err.abs_file_path = path
        return None
    return list(value)


async def validate_project_config(
    config: ValidatedConfig,
    sys: CompilerSystem,
    init: LoadConfigInit,
) -> ProjectConfigResults:
    """
    Locate and split the type-checking project file.

    An explicit ``project_config`` on the config must exist. Otherwise
    ``pyrightconfig.json`` in ``root_dir`` is used when present, and its absence is
    not an error.
    """
    results = ProjectConfigResults()

    explicit = config.project_config
    if explicit:
        path = resolve_path(config.root_dir, explicit)
    else:
        path = resolve_path(config.root_dir, PROJECT_CONFIG_FILE_NAME)

    try:
        text = await sys.read_file(path)
    except FileNotFoundError:
        if explicit:
            err = build_error(results.diagnostics)
            err.header = "Missing Project Configuration"
            err.message_text = f'Unable to find project configuration "{path}".'
            err.abs_file_path = path
        else:
            logger.debug("No project configuration found. path=%s", path)
        return results

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        err = build_error(results.diagnostics)
        err.header = "Invalid Project Configuration"
        err.message_text = f'Unable to parse "{path}": {exc.msg} (line {exc.lineno}, column {exc.colno})'
        err.abs_file_path = path
        return results

    if not isinstance(data, dict):
        err = build_error(results.diagnostics)
        err.header = "Invalid Project Configuration"
        err.message_text = f'Top-level value of "{path}" must be an object, got: {type(data).__name__}'
        err.abs_file_path = path
        return results

    results.path = path
    results.files = _as_str_list(data.get("files"), "files", path, results)
    results.include = _as_str_list(data.get("include"), "include", path, results)
    results.exclude = _as_str_list(data.get("exclude"), "exclude", path, results)

    extends = data.get("extends")
    if extends is not None and not isinstance(extends, str):
        err = build_error(results.diagnostics)
        err.header = "Invalid Project Configuration"
        err.message_text = f'"extends" in "{path}" must be a string.'
        err.abs_file_path = path
    else:
        results.extends = extends

    results.compiler_options = {
        k: v for k, v in data.items() if k not in _LIST_KEYS and k != "extends"
    }
    return results

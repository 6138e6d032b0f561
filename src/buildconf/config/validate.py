from __future__ import annotations

from pydantic import ValidationError

from buildconf.config.models import UnvalidatedConfig, ValidatedConfig, ValidatedConfigResults
from buildconf.diagnostics import build_error, build_warn


def _format_loc(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "config"


def validate_config(config: UnvalidatedConfig) -> ValidatedConfigResults:
    results = ValidatedConfigResults(config=None)
    try:
        validated = ValidatedConfig.model_validate(config)
    except ValidationError as exc:
        for error in exc.errors():
            err = build_error(results.diagnostics)
            err.header = "Invalid Configuration"
            err.message_text = f"{_format_loc(error['loc'])}: {error['msg']}"
            err.abs_file_path = config.get("config_path")
        return results

    flags = validated.flags
    if (flags.debug or flags.verbose) and flags.log_level is not None:
        warn = build_warn(results.diagnostics)
        warn.message_text = (
            f'The "log_level" flag "{flags.log_level}" is ignored because debug output is enabled.'
        )

    results.config = validated
    return results

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from buildconf.config.evaluate import create_config_evaluator
from buildconf.config.interfaces import ConfigFileEvaluator, ConfigValidator, ProjectConfigValidator
from buildconf.config.models import LoadConfigInit, LoadConfigResults, UnvalidatedConfig
from buildconf.config.environment import apply_environment_flags, read_environment
from buildconf.config.project import validate_project_config
from buildconf.config.validate import validate_config
from buildconf.diagnostics import Diagnostic, build_error, catch_error, has_error
from buildconf.logging import create_logger
from buildconf.system.environment import Platform, detect_platform
from buildconf.system.interfaces import CompilerSystem
from buildconf.system.local import create_system
from buildconf.system.paths import dirname, normalize_path, resolve_path

logger = logging.getLogger(__name__)


async def load_config_file(
    sys: CompilerSystem,
    diagnostics: list[Diagnostic],
    config_path: Optional[str],
    evaluator: ConfigFileEvaluator,
) -> Optional[UnvalidatedConfig]:
    """
    Load a configuration file from disk.

    Args:
        sys: The system used to resolve and read the file.
        diagnostics: Errors are appended here. Nothing is appended when no path is given.
        config_path: Path to the config file. Anything other than a non-empty string
            means there is no file to load.
        evaluator: Executes the file and returns its exports.

    Returns:
        The unvalidated configuration with ``config_path`` stamped on it, or ``None``.
    """
    if not isinstance(config_path, str) or not config_path:
        return None

    resolved_path = resolve_path(sys.get_current_directory(), config_path)

    config_file_data = await evaluator.evaluate(sys, diagnostics, resolved_path)
    if has_error(diagnostics):
        return None

    exported = getattr(config_file_data, "config", None)
    if exported is None:
        err = build_error(diagnostics)
        err.message_text = f'Invalid configuration file "{resolved_path}". Missing "config" property.'
        err.abs_file_path = resolved_path
        return None

    if not isinstance(exported, Mapping):
        err = build_error(diagnostics)
        err.message_text = (
            f'Invalid configuration file "{resolved_path}". '
            f'The "config" property must be a mapping, got: {type(exported).__name__}'
        )
        err.abs_file_path = resolved_path
        return None

    config: UnvalidatedConfig = dict(exported)
    config["config_path"] = resolved_path
    logger.debug("Loaded configuration file. path=%s keys=%s", resolved_path, len(config))
    return config


class BuildConfigLoader:
    """
    Loads and validates a configuration for the lifetime of a build task.

    A configuration may be given as an inline mapping, as a path to a config file,
    or both. When both are present they are merged one level deep and inline keys
    take precedence.
    """

    def __init__(
        self,
        *,
        platform: Optional[Platform] = None,
        evaluator: Optional[ConfigFileEvaluator] = None,
        config_validator: ConfigValidator = validate_config,
        project_validator: ProjectConfigValidator = validate_project_config,
    ) -> None:
        self._evaluator = evaluator or create_config_evaluator(platform or detect_platform())
        self._config_validator = config_validator
        self._project_validator = project_validator

    async def load(self, init: Optional[LoadConfigInit] = None) -> LoadConfigResults:
        init = init or LoadConfigInit()
        results = LoadConfigResults()

        try:
            sys = init.sys or create_system()
            inline: Mapping[str, Any] = init.config or {}
            config_path = init.config_path or inline.get("config_path")

            loaded_config_file = await load_config_file(sys, results.diagnostics, config_path, self._evaluator)
            if has_error(results.diagnostics):
                return results

            unknown_config: UnvalidatedConfig
            if loaded_config_file is not None:
                config_path = loaded_config_file["config_path"]
                unknown_config = {**loaded_config_file, **inline}
                unknown_config["config_path"] = config_path
                unknown_config["root_dir"] = dirname(config_path)
            else:
                # no config file, which is fine
                unknown_config = dict(inline)
                unknown_config["config_path"] = None
                unknown_config["root_dir"] = normalize_path(sys.get_current_directory())

            if init.env_prefix:
                dotenv_path = None
                if init.dotenv_path is not None:
                    dotenv_path = Path(resolve_path(sys.get_current_directory(), init.dotenv_path))
                apply_environment_flags(unknown_config, read_environment(dotenv_path), init.env_prefix)

            unknown_config["sys"] = sys

            validated = self._config_validator(unknown_config)
            results.diagnostics.extend(validated.diagnostics)
            if has_error(results.diagnostics):
                return results

            config = validated.config
            if config is None:
                err = build_error(results.diagnostics)
                err.message_text = "Configuration validation did not return a configuration."
                return results
            results.config = config

            if config.flags.debug or config.flags.verbose:
                config.log_level = "debug"
            elif config.flags.log_level:
                config.log_level = config.flags.log_level
            elif not isinstance(config.log_level, str):
                config.log_level = "info"

            config.logger = init.logger or config.logger or create_logger()
            config.logger.set_level(config.log_level)

            if not has_error(results.diagnostics):
                project_results = await self._project_validator(config, sys, init)
                results.diagnostics.extend(project_results.diagnostics)

                config.project_config = project_results.path
                config.project_compiler_options = project_results.compiler_options

                results.project.path = project_results.path
                results.project.compiler_options = copy.deepcopy(project_results.compiler_options)
                results.project.files = project_results.files
                results.project.include = project_results.include
                results.project.exclude = project_results.exclude
                results.project.extends = project_results.extends

            logger.debug(
                "Configuration loaded. config_path=%s root_dir=%s log_level=%s",
                config.config_path,
                config.root_dir,
                config.log_level,
            )
        except Exception as exc:
            catch_error(results.diagnostics, exc)

        return results


async def load_config(init: Optional[LoadConfigInit] = None) -> LoadConfigResults:
    """Load a configuration with the evaluator matching the current platform."""
    return await BuildConfigLoader().load(init)

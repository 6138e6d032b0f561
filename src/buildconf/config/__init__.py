"""Configuration loading, merging and validation."""

from buildconf.config.evaluate import NativeConfigEvaluator, SandboxedConfigEvaluator, create_config_evaluator
from buildconf.config.loader import BuildConfigLoader, load_config, load_config_file
from buildconf.config.models import (
    ConfigFlags,
    LoadConfigInit,
    LoadConfigResults,
    ProjectConfigSummary,
    ValidatedConfig,
)
from buildconf.config.transpile import CONFIG_TRANSPILE_OPTIONS, TranspileOptions, transpile_typed_config

__all__ = [
    "BuildConfigLoader",
    "CONFIG_TRANSPILE_OPTIONS",
    "ConfigFlags",
    "LoadConfigInit",
    "LoadConfigResults",
    "NativeConfigEvaluator",
    "ProjectConfigSummary",
    "SandboxedConfigEvaluator",
    "TranspileOptions",
    "ValidatedConfig",
    "create_config_evaluator",
    "load_config",
    "load_config_file",
    "transpile_typed_config",
]

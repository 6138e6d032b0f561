"""Load, merge and validate build tool configuration."""

from buildconf.config import BuildConfigLoader, LoadConfigInit, LoadConfigResults, ValidatedConfig, load_config
from buildconf.diagnostics import Diagnostic, has_error
from buildconf.logging import ConsoleLogger, create_logger
from buildconf.system import CompilerSystem, LocalSystem, Platform, create_system, detect_platform

__all__ = [
    "BuildConfigLoader",
    "CompilerSystem",
    "ConsoleLogger",
    "Diagnostic",
    "LoadConfigInit",
    "LoadConfigResults",
    "LocalSystem",
    "Platform",
    "ValidatedConfig",
    "create_logger",
    "create_system",
    "detect_platform",
    "has_error",
    "load_config",
]

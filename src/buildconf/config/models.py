from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from buildconf.diagnostics import Diagnostic
from buildconf.logging import Logger, LogLevel
from buildconf.system.interfaces import CompilerSystem

UnvalidatedConfig = dict[str, Any]


class ConfigFlags(BaseModel):
    """Command line flags carried on the configuration."""

    model_config = ConfigDict(extra="allow")

    debug: bool = False
    verbose: bool = False
    log_level: Optional[LogLevel] = None


class ValidatedConfig(BaseModel):
    """
    Configuration after the loader has merged all sources and the schema validator
    accepted it.

    Only the fields the loader itself reads or derives are declared. Every other key
    from the config file or the inline mapping is kept as an extra field.
    """

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    config_path: Optional[str] = None
    root_dir: str
    log_level: Optional[LogLevel] = None
    flags: ConfigFlags = Field(default_factory=ConfigFlags)

    sys: Optional[Any] = Field(default=None, exclude=True)
    logger: Optional[Any] = Field(default=None, exclude=True)

    project_config: Optional[str] = None
    project_compiler_options: Optional[dict[str, Any]] = None


@dataclass(frozen=True, slots=True)
class LoadConfigInit:
    """
    Inputs to a configuration load.

    All fields are optional. Without ``config_path`` (here or as ``config_path`` in
    ``config``) the file system is never touched.
    """

    sys: Optional[CompilerSystem] = None
    config: Optional[Mapping[str, Any]] = None
    config_path: Optional[str] = None
    logger: Optional[Logger] = None
    dotenv_path: Optional[str] = None
    env_prefix: Optional[str] = None


@dataclass(slots=True)
class ProjectConfigSummary:
    path: Optional[str] = None
    compiler_options: Optional[dict[str, Any]] = None
    files: Optional[list[str]] = None
    include: Optional[list[str]] = None
    exclude: Optional[list[str]] = None
    extends: Optional[str] = None


@dataclass(slots=True)
class LoadConfigResults:
    config: Optional[ValidatedConfig] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    project: ProjectConfigSummary = field(default_factory=ProjectConfigSummary)


@dataclass(slots=True)
class ValidatedConfigResults:
    config: Optional[ValidatedConfig]
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass(slots=True)
class ProjectConfigResults:
    path: Optional[str] = None
    compiler_options: Optional[dict[str, Any]] = None
    files: Optional[list[str]] = None
    include: Optional[list[str]] = None
    exclude: Optional[list[str]] = None
    extends: Optional[str] = None
    diagnostics: list[Diagnostic] = field(default_factory=list)

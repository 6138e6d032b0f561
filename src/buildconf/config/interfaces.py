from __future__ import annotations

from typing import Any, Optional, Protocol

from buildconf.config.models import (
    LoadConfigInit,
    LoadConfigResults,
    ProjectConfigResults,
    UnvalidatedConfig,
    ValidatedConfig,
    ValidatedConfigResults,
)
from buildconf.diagnostics import Diagnostic
from buildconf.system.interfaces import CompilerSystem


class ConfigLoader(Protocol):
    """
    Loads the effective build configuration.

    Implementations never raise. Every failure is reported as a diagnostic on the
    returned results.
    """

    async def load(self, init: Optional[LoadConfigInit] = None) -> LoadConfigResults:
        ...


class ConfigFileEvaluator(Protocol):
    """Executes a config file and returns the module-like object it exported."""

    async def evaluate(
        self,
        sys: CompilerSystem,
        diagnostics: list[Diagnostic],
        config_file_path: str,
    ) -> Optional[Any]:
        ...


class ConfigValidator(Protocol):
    def __call__(self, config: UnvalidatedConfig) -> ValidatedConfigResults:
        ...


class ProjectConfigValidator(Protocol):
    async def __call__(
        self,
        config: ValidatedConfig,
        sys: CompilerSystem,
        init: LoadConfigInit,
    ) -> ProjectConfigResults:
        ...

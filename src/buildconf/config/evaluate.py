from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Any, Callable, Optional

from buildconf.config.interfaces import ConfigFileEvaluator
from buildconf.config.transpile import transpile_typed_config
from buildconf.diagnostics import Diagnostic, catch_error, has_error
from buildconf.system.environment import Platform
from buildconf.system.interfaces import CompilerSystem
from buildconf.system.native_import import NativeImportResults, native_import

logger = logging.getLogger(__name__)

_SANDBOX_MODULE_NAME = "__buildconf_config__"


class NativeConfigEvaluator:
    """Evaluates config files with the host's import machinery."""

    def __init__(self, importer: Callable[[str], NativeImportResults] = native_import) -> None:
        self._importer = importer

    async def evaluate(
        self,
        sys: CompilerSystem,
        diagnostics: list[Diagnostic],
        config_file_path: str,
    ) -> Optional[Any]:
        try:
            results = self._importer(config_file_path)
            diagnostics.extend(results.diagnostics)
            return results.module
        except Exception as exc:
            catch_error(diagnostics, exc, file_path=config_file_path)
            return None


class SandboxedConfigEvaluator:
    """
    Evaluates config files without an import system.

    The file is read through ``sys``, lowered to the plain dialect and executed in a
    fresh namespace whose only predefined name is an empty ``exports`` object. This
    is the only place in the package that executes config file source directly.
    """

    async def evaluate(
        self,
        sys: CompilerSystem,
        diagnostics: list[Diagnostic],
        config_file_path: str,
    ) -> Optional[Any]:
        try:
            source_text = await sys.read_file(config_file_path)
            source_text = transpile_typed_config(diagnostics, source_text, config_file_path)
            if has_error(diagnostics):
                return None

            code = compile(source_text, config_file_path, "exec")
            exports = SimpleNamespace()
            namespace: dict[str, Any] = {
                "__name__": _SANDBOX_MODULE_NAME,
                "__file__": config_file_path,
                "exports": exports,
            }
            exec(code, namespace)
            logger.debug("Evaluated config file in sandbox. path=%s", config_file_path)
            return exports
        except Exception as exc:
            catch_error(diagnostics, exc, file_path=config_file_path)
            return None


def create_config_evaluator(platform: Platform) -> ConfigFileEvaluator:
    if platform.native_modules:
        return NativeConfigEvaluator()
    return SandboxedConfigEvaluator()

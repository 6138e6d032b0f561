from __future__ import annotations

import hashlib
import importlib.machinery
import importlib.util
import logging
import sys
from dataclasses import dataclass, field
from types import ModuleType, SimpleNamespace
from typing import Optional

from buildconf.diagnostics import Diagnostic, catch_error

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NativeImportResults:
    module: Optional[ModuleType]
    diagnostics: list[Diagnostic] = field(default_factory=list)


class _ConfigFileLoader(importlib.machinery.SourceFileLoader):
    # Config files are compiled from source on every load, never from __pycache__.
    def get_code(self, fullname: str):
        return self.source_to_code(self.get_data(self.path), self.path)


def _module_name_for(path: str) -> str:
    digest = hashlib.sha256(path.encode("utf-8")).hexdigest()[:16]
    return f"_buildconf_config_{digest}"


def native_import(path: str) -> NativeImportResults:
    """
    Load and execute ``path`` with the host's import machinery.

    The file is executed fresh on every call. It is registered in ``sys.modules``
    only while its body runs, so class decorators such as ``dataclass`` can find
    their module, and is removed afterwards so repeated loads do not accumulate.
    A module written against the ``exports`` convention is surfaced the same way as
    one defining a top-level ``config``.
    """
    results = NativeImportResults(module=None)
    name = _module_name_for(path)
    try:
        loader = _ConfigFileLoader(name, path)
        spec = importlib.util.spec_from_file_location(name, path, loader=loader)
        if spec is None:
            raise ImportError(f"Unable to create a module spec for: {path}")
        module = importlib.util.module_from_spec(spec)
        exports = SimpleNamespace()
        module.exports = exports  # type: ignore[attr-defined]

        sys.modules[name] = module
        try:
            loader.exec_module(module)
        finally:
            sys.modules.pop(name, None)

        if getattr(module, "config", None) is None and getattr(exports, "config", None) is not None:
            module.config = exports.config  # type: ignore[attr-defined]

        logger.debug("Imported config module. path=%s module=%s", path, name)
        results.module = module
    except Exception as exc:
        catch_error(results.diagnostics, exc, file_path=path)
    return results

"""Host system abstraction used by the configuration loader."""

from buildconf.system.environment import Platform, detect_platform
from buildconf.system.interfaces import CompilerSystem
from buildconf.system.local import LocalSystem, create_system
from buildconf.system.native_import import NativeImportResults, native_import
from buildconf.system.paths import normalize_path, resolve_path

__all__ = [
    "CompilerSystem",
    "LocalSystem",
    "NativeImportResults",
    "Platform",
    "create_system",
    "detect_platform",
    "native_import",
    "normalize_path",
    "resolve_path",
]

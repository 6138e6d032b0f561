from __future__ import annotations

import sys
from dataclasses import dataclass

# Hosts where importlib cannot load arbitrary files from a real file system.
_SANDBOXED_PLATFORMS = frozenset({"emscripten", "wasi"})


@dataclass(frozen=True, slots=True)
class Platform:
    """
    Capabilities of the host process that affect how config files are evaluated.

    The descriptor is fixed for the lifetime of the process and injected into the
    evaluator factory rather than read as a global.
    """

    name: str
    native_modules: bool


def detect_platform() -> Platform:
    name = sys.platform
    return Platform(name=name, native_modules=name not in _SANDBOXED_PLATFORMS)

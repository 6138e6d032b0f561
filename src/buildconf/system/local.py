from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from buildconf.system.paths import normalize_path


class LocalSystem:
    def __init__(self, cwd: Optional[str] = None) -> None:
        self._cwd = cwd

    async def read_file(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def get_current_directory(self) -> str:
        return normalize_path(self._cwd if self._cwd is not None else os.getcwd())


def create_system() -> LocalSystem:
    return LocalSystem()

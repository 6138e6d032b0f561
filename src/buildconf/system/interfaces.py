from __future__ import annotations

from typing import Protocol


class CompilerSystem(Protocol):
    """
    The narrow slice of the host system the configuration loader needs.

    Implementations may be backed by the local disk, an in-memory file map, or a
    browser-hosted virtual file system.
    """

    async def read_file(self, path: str) -> str:
        """Return the full text of ``path``. Raise ``OSError`` if it cannot be read."""

    def get_current_directory(self) -> str:
        """Return the absolute working directory used to resolve relative paths."""

from __future__ import annotations

import posixpath


def normalize_path(path: str) -> str:
    """Normalize ``path`` to forward slashes with redundant segments removed."""
    if not isinstance(path, str):
        raise TypeError(f"Expected a path string, got: {type(path).__name__}")
    if not path:
        return path
    normalized = posixpath.normpath(path.replace("\\", "/"))
    # normpath keeps a leading "//" as a distinct POSIX root; only UNC paths want that
    if normalized.startswith("//") and not path.startswith("\\\\"):
        normalized = normalized[1:]
    return normalized


def _is_absolute(path: str) -> bool:
    return path.startswith("/") or (len(path) > 1 and path[1] == ":")


def resolve_path(cwd: str, path: str) -> str:
    normalized = normalize_path(path)
    if _is_absolute(normalized):
        return normalized
    return normalize_path(posixpath.join(normalize_path(cwd), normalized))


def dirname(path: str) -> str:
    return normalize_path(posixpath.dirname(normalize_path(path)))

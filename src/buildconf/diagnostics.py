from __future__ import annotations

import logging
import traceback
from dataclasses import dataclass
from typing import Iterable, Literal, Optional

logger = logging.getLogger(__name__)

DiagnosticLevel = Literal["error", "warn"]
DiagnosticType = Literal["build", "runtime"]


@dataclass(slots=True)
class Diagnostic:
    """
    One structured error or warning collected while loading a configuration.

    Diagnostics are appended to a list owned by the caller. Callees only append,
    they never remove or reorder entries.
    """

    level: DiagnosticLevel
    message_text: str
    header: str = "Build Error"
    type: DiagnosticType = "build"
    abs_file_path: Optional[str] = None
    line_number: Optional[int] = None


def has_error(diagnostics: Optional[Iterable[Diagnostic]]) -> bool:
    if not diagnostics:
        return False
    return any(d.level == "error" for d in diagnostics)


def build_error(diagnostics: Optional[list[Diagnostic]] = None) -> Diagnostic:
    diagnostic = Diagnostic(level="error", message_text="build error")
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic


def build_warn(diagnostics: Optional[list[Diagnostic]] = None) -> Diagnostic:
    diagnostic = Diagnostic(level="warn", message_text="build warn", header="Build Warn")
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic


def catch_error(
    diagnostics: Optional[list[Diagnostic]],
    exc: BaseException,
    message: Optional[str] = None,
    *,
    file_path: Optional[str] = None,
) -> Diagnostic:
    """
    Convert an exception into an error diagnostic and append it.

    The location comes from the exception itself (``filename``, ``lineno``) when it
    carries one, otherwise from the innermost traceback frame executing ``file_path``.
    """
    diagnostic = Diagnostic(level="error", message_text="", type="runtime")
    if message:
        diagnostic.message_text = message
    else:
        text = str(exc)
        diagnostic.message_text = f"{type(exc).__name__}: {text}" if text else type(exc).__name__

    filename = getattr(exc, "filename", None)
    if isinstance(filename, str) and filename:
        diagnostic.abs_file_path = filename
        if isinstance(exc, SyntaxError) and exc.lineno:
            diagnostic.line_number = exc.lineno
    elif file_path:
        for frame in reversed(traceback.extract_tb(exc.__traceback__)):
            if frame.filename == file_path:
                diagnostic.abs_file_path = file_path
                diagnostic.line_number = frame.lineno
                break

    logger.debug("Converted exception into diagnostic. error=%s", type(exc).__name__, exc_info=exc)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic

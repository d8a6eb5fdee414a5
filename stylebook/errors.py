"""Exception types and the top-level error policy for assembly runs.

Failures fall into two families. Template compilation or rendering problems in
a view are annotated with the originating file at the per-view boundary and
re-raised as :class:`ViewRenderError`. Everything else (unreadable files,
malformed front matter, missing layouts) propagates untouched to
:func:`handle_error`, which normalises it into an :class:`ErrorReport` and then
either hands it to the configured callback, logs it, or stops the process.

Examples
--------
>>> report = ErrorReport.from_exception(ValueError("bad value"))
>>> (report.name, report.message)
('ValueError', 'bad value')
"""

from __future__ import annotations

import dataclasses as dc
import logging
import traceback
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from .config import AssemblyConfig

logger = logging.getLogger(__name__)


class AssemblyError(RuntimeError):
    """Base class for failures raised while assembling a style guide."""

    reason: str = ""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class FrontMatterError(AssemblyError):
    """Raised when a file's front-matter block cannot be parsed."""

    reason = "front-matter"


class LayoutNotFoundError(AssemblyError):
    """Raised when a view selects a layout that was never loaded."""

    reason = "missing-layout"


class ViewRenderError(AssemblyError):
    """Raised when a view fails to compile or render."""

    reason = "template"


@dc.dataclass(slots=True)
class ErrorReport:
    """Structured description of a failed run handed to ``on_error`` callbacks.

    Attributes
    ----------
    name : str
        Exception class name, ``"Error"`` when unknown.
    reason : str
        Short machine-readable failure family; empty when unclassified.
    message : str
        Human-readable message, ``"An error occurred"`` when the exception
        carried none.
    stack : str
        Formatted traceback of the original exception.
    path : Path or None
        Source file the failure was attributed to, when known.
    exception : BaseException or None
        The exception that triggered the report.
    """

    name: str = "Error"
    reason: str = ""
    message: str = "An error occurred"
    stack: str = ""
    path: Path | None = None
    exception: BaseException | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorReport:
        """Build a report from ``exc``, filling defaults for missing fields."""
        base = cls()
        message = str(exc) or base.message
        stack = "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        )
        return cls(
            name=type(exc).__name__ or base.name,
            reason=getattr(exc, "reason", "") or base.reason,
            message=message,
            stack=stack,
            path=getattr(exc, "path", None),
            exception=exc,
        )


def handle_error(exc: BaseException, config: AssemblyConfig) -> ErrorReport:
    """Apply the configured error policy to ``exc``.

    Parameters
    ----------
    exc : BaseException
        The exception caught at the invocation boundary.
    config : AssemblyConfig
        Configuration providing ``on_error`` and ``log_errors``.

    Returns
    -------
    ErrorReport
        The normalised report, returned when the run is allowed to continue.

    Raises
    ------
    SystemExit
        With status ``1`` when neither a callback nor error logging is
        configured.
    """
    report = ErrorReport.from_exception(exc)
    should_exit = True

    if callable(config.on_error):
        config.on_error(report)
        should_exit = False

    if config.log_errors:
        logger.error("Error (stylebook): %s\n%s", report.message, report.stack)
        should_exit = False

    if should_exit:
        logger.error("Error (stylebook): %s\n%s", report.message, report.stack)
        raise SystemExit(1) from exc

    return report


__all__ = [
    "AssemblyError",
    "ErrorReport",
    "FrontMatterError",
    "LayoutNotFoundError",
    "ViewRenderError",
    "handle_error",
]

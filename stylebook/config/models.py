"""Typed dataclasses describing a style-guide assembly configuration."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from stylebook.errors import ErrorReport


class AssemblyConfigError(ValueError):
    """Raised when the assembly configuration is invalid or incomplete."""


def _patterns(*values: str) -> list[str]:
    return list(values)


@dc.dataclass(slots=True)
class CollectionKeys:
    """Context names under which the three collection trees are exposed."""

    materials: str = "materials"
    views: str = "views"
    docs: str = "docs"


@dc.dataclass(slots=True)
class BeautifierOptions:
    """Indentation settings for pretty-printed fragment markup."""

    indent_size: int = 1
    indent_char: str = "\t"
    indent_with_tabs: bool = True

    @property
    def indent(self) -> str:
        """Return the literal indentation unit."""
        if self.indent_with_tabs:
            return "\t"
        return self.indent_char * self.indent_size


@dc.dataclass(slots=True)
class AssemblyConfig:
    """A fully resolved assembly configuration.

    Attributes
    ----------
    layout : str
        Id of the layout used when a view does not choose one.
    layouts, layout_includes, views, materials, data, docs : list[str]
        Glob pattern sets locating each kind of source file.
    build_data : dict
        Extra values merged into every render context.
    keys : CollectionKeys
        Context names for the materials, views, and docs trees.
    dest : Path
        Output root for rendered views.
    extension : str
        Extension given to every rendered view.
    dest_map : dict[str, str]
        Output directory overrides keyed by view collection name.
    beautifier : BeautifierOptions
        Pretty-printer settings for fragment output.
    helpers : dict[str, Callable]
        User template helpers registered as Jinja globals.
    on_error : Callable or None
        Callback receiving an :class:`~stylebook.errors.ErrorReport`.
    log_errors : bool
        Log failures and continue instead of exiting.
    root : Path
        Directory that relative patterns and output paths resolve against.
    pygments_style : str
        Pygments style used for code blocks in notes and docs.
    """

    layout: str = "default"
    layouts: list[str] = dc.field(
        default_factory=lambda: _patterns("src/views/layouts/*")
    )
    layout_includes: list[str] = dc.field(
        default_factory=lambda: _patterns("src/views/layouts/includes/*")
    )
    views: list[str] = dc.field(
        default_factory=lambda: _patterns("src/views/**/*", "!src/views/layouts/**")
    )
    materials: list[str] = dc.field(
        default_factory=lambda: _patterns("src/materials/**/*")
    )
    data: list[str] = dc.field(
        default_factory=lambda: _patterns("src/data/**/*.{json,yml,yaml}")
    )
    build_data: dict[str, typ.Any] = dc.field(default_factory=dict)
    docs: list[str] = dc.field(default_factory=lambda: _patterns("src/docs/**/*.md"))
    keys: CollectionKeys = dc.field(default_factory=CollectionKeys)
    dest: Path = Path("dist")
    extension: str = ".html"
    dest_map: dict[str, str] = dc.field(default_factory=dict)
    beautifier: BeautifierOptions = dc.field(default_factory=BeautifierOptions)
    helpers: dict[str, cabc.Callable[..., typ.Any]] = dc.field(default_factory=dict)
    on_error: cabc.Callable[[ErrorReport], typ.Any] | None = None
    log_errors: bool = False
    root: Path = dc.field(default_factory=Path.cwd)
    pygments_style: str = "monokai"

    def resolve(self, path: Path | str) -> Path:
        """Anchor ``path`` at :attr:`root` unless it is already absolute."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate


__all__ = [
    "AssemblyConfig",
    "AssemblyConfigError",
    "BeautifierOptions",
    "CollectionKeys",
]

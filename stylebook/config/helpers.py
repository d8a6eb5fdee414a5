"""Utility helpers shared by the stylebook configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

from .models import AssemblyConfigError, BeautifierOptions, CollectionKeys

OPTION_ALIASES: dict[str, str] = {
    "layoutIncludes": "layout_includes",
    "buildData": "build_data",
    "destMap": "dest_map",
    "onError": "on_error",
    "logErrors": "log_errors",
    "pygmentsStyle": "pygments_style",
}
PATTERN_OPTIONS = frozenset(
    {"layouts", "layout_includes", "views", "materials", "data", "docs"}
)


def _normalize_option_names(
    options: typ.Mapping[str, typ.Any],
) -> dict[str, typ.Any]:
    """Map camelCase option spellings onto dataclass field names."""
    return {OPTION_ALIASES.get(key, key): value for key, value in options.items()}


def _as_pattern_list(name: str, value: object) -> list[str]:
    """Return ``value`` as a list of glob patterns."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, list | tuple):
        return [str(pattern) for pattern in value]
    msg = f"Option '{name}' must be a pattern string or a list of patterns."
    raise AssemblyConfigError(msg)


def _as_mapping(name: str, value: object) -> dict[str, typ.Any]:
    """Return ``value`` as a plain dict, treating ``None`` as empty."""
    if value is None:
        return {}
    if isinstance(value, cabc.Mapping):
        return dict(value)
    msg = f"Option '{name}' must be a mapping."
    raise AssemblyConfigError(msg)


def _merge_keys(
    base: CollectionKeys, override: typ.Mapping[str, typ.Any] | None
) -> CollectionKeys:
    """Merge an override mapping into the base CollectionKeys."""
    if not override:
        return base
    return CollectionKeys(
        materials=str(override.get("materials", base.materials)),
        views=str(override.get("views", base.views)),
        docs=str(override.get("docs", base.docs)),
    )


def _merge_beautifier(
    base: BeautifierOptions, override: typ.Mapping[str, typ.Any] | None
) -> BeautifierOptions:
    """Merge an override mapping into the base BeautifierOptions."""
    if not override:
        return base
    return BeautifierOptions(
        indent_size=int(override.get("indent_size", base.indent_size)),
        indent_char=str(override.get("indent_char", base.indent_char)),
        indent_with_tabs=bool(
            override.get("indent_with_tabs", base.indent_with_tabs)
        ),
    )


def _as_path(value: object) -> Path:
    return value if isinstance(value, Path) else Path(str(value))


__all__ = [
    "OPTION_ALIASES",
    "PATTERN_OPTIONS",
    "_as_mapping",
    "_as_path",
    "_as_pattern_list",
    "_merge_beautifier",
    "_merge_keys",
    "_normalize_option_names",
]

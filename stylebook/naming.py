r"""Derive ids, display names, and ordering from file and directory names.

Materials, views, docs, and layouts are all keyed by their filename stem. Stems
may carry numeric ordering prefixes (``02-buttons``) that keep directory
listings sorted; ids drop those prefixes while collection item keys keep them.

Example
-------
>>> from stylebook.naming import get_name, to_title_case
>>> get_name("src/materials/components/02-primary button.html")
'primary-button'
>>> to_title_case("primary-button")
'Primary Button'
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import PurePath

LEADING_ORDER_PATTERN = re.compile(r"^[0-9|.\-]+")
SEGMENT_ORDER_PATTERN = re.compile(r"(^|\.)(?:\d+[-.])+")
WHITESPACE_PATTERN = re.compile(r"\s")
WORD_SEPARATOR_PATTERN = re.compile(r"[-_]")
WORD_PATTERN = re.compile(r"\w\S*")

T = typ.TypeVar("T")


def get_name(path: str | PurePath, *, preserve_numbers: bool = False) -> str:
    """Return the stem of ``path`` with whitespace replaced by dashes.

    Parameters
    ----------
    path : str or PurePath
        File or directory path; only the final component is used.
    preserve_numbers : bool, optional
        Keep a leading numeric ordering prefix when ``True``.

    Returns
    -------
    str
        The normalised name, e.g. ``"bar"`` for ``"02-bar.html"``.
    """
    pure = PurePath(path)
    name = WHITESPACE_PATTERN.sub("-", pure.stem)
    if preserve_numbers:
        return name
    return LEADING_ORDER_PATTERN.sub("", name)


def to_title_case(value: str) -> str:
    """Convert a dashed or underscored name into title case."""
    spaced = WORD_SEPARATOR_PATTERN.sub(" ", value)
    return WORD_PATTERN.sub(lambda match: match.group(0).capitalize(), spaced)


def strip_order_prefixes(reference: str) -> str:
    """Remove numeric ordering prefixes from every dotted segment.

    ``02-buttons.01-primary`` becomes ``buttons.primary``; repeated prefixes on
    the same segment (``01.02-primary``) are removed together.
    """
    return SEGMENT_ORDER_PATTERN.sub(r"\1", reference)


def namespaced_id(material_id: str) -> str:
    """Return the flattened context key for a material id."""
    return material_id.replace(".", "-")


def sort_by_order(
    items: typ.Mapping[str, T], order_of: typ.Callable[[T], object]
) -> dict[str, T]:
    """Return ``items`` re-keyed in display order.

    Items exposing a numeric order come first in ascending order; the rest
    follow alphabetically by key. Ties on order fall back to the key.
    """

    def _sort_key(entry: tuple[str, T]) -> tuple[int, float, str]:
        key, item = entry
        order = _coerce_order(order_of(item))
        if order is None:
            return (1, 0.0, key)
        return (0, order, key)

    return dict(sorted(items.items(), key=_sort_key))


def _coerce_order(value: object) -> float | None:
    """Return ``value`` as a float when it is a usable ordering value."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


__all__ = [
    "get_name",
    "namespaced_id",
    "sort_by_order",
    "strip_order_prefixes",
    "to_title_case",
]

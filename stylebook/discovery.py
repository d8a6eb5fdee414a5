"""Expand configured glob pattern sets into concrete file lists.

Pattern sets follow the conventions of the style-guide layout: ``**`` recurses,
``{a,b}`` expands to alternatives, and a leading ``!`` removes matches of an
earlier pattern. Relative patterns resolve against the project root.

Examples
--------
>>> expand_braces("src/data/**/*.{json,yml}")
['src/data/**/*.json', 'src/data/**/*.yml']
>>> static_base("src/materials/**/*")
PurePosixPath('src/materials')
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path, PurePath, PurePosixPath

if typ.TYPE_CHECKING:
    import collections.abc as cabc

BRACE_PATTERN = re.compile(r"\{([^{}]*)\}")
MAGIC_CHARACTERS = frozenset("*?[{")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, innermost groups first."""
    match = BRACE_PATTERN.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def static_base(pattern: str) -> PurePath:
    """Return the leading directory of ``pattern`` that contains no wildcards."""
    parts: list[str] = []
    for part in PurePosixPath(pattern.lstrip("!")).parts:
        if MAGIC_CHARACTERS.intersection(part):
            break
        parts.append(part)
    if not parts:
        return PurePosixPath(".")
    return PurePosixPath(*parts)


def positive_patterns(patterns: cabc.Iterable[str]) -> list[str]:
    """Return the inclusion patterns from ``patterns``."""
    return [pattern for pattern in patterns if not pattern.startswith("!")]


def base_directories(patterns: cabc.Iterable[str], root: Path) -> list[Path]:
    """Resolve the static base directory of every inclusion pattern."""
    bases: list[Path] = []
    for pattern in positive_patterns(patterns):
        base = _anchor(root, str(static_base(pattern)))
        if base not in bases:
            bases.append(base)
    return bases


def find_files(patterns: cabc.Iterable[str], root: Path) -> list[Path]:
    """Return the sorted files matched by ``patterns`` under ``root``.

    Parameters
    ----------
    patterns : Iterable[str]
        Glob patterns applied in order; ``!``-prefixed patterns remove
        earlier matches.
    root : Path
        Directory that relative patterns are anchored to.

    Returns
    -------
    list[Path]
        Absolute, de-duplicated file paths in lexical order.
    """
    matched: set[Path] = set()
    for pattern in patterns:
        excluding = pattern.startswith("!")
        found = _glob(pattern[1:] if excluding else pattern, root)
        if excluding:
            matched.difference_update(found)
        else:
            matched.update(path for path in found if path.is_file())
    return sorted(matched)


def find_directories(patterns: cabc.Iterable[str], root: Path) -> set[Path]:
    """Return every directory below the static bases of ``patterns``."""
    directories: set[Path] = set()
    for base in base_directories(patterns, root):
        if base.is_dir():
            directories.update(path for path in base.rglob("*") if path.is_dir())
    return directories


def _glob(pattern: str, root: Path) -> set[Path]:
    """Expand a single pattern (with braces) into absolute paths."""
    found: set[Path] = set()
    for expanded in expand_braces(pattern):
        if expanded.endswith("**"):
            expanded = f"{expanded}/*"
        pure = PurePath(expanded)
        if pure.is_absolute():
            anchor = Path(pure.anchor)
            relative = str(pure.relative_to(pure.anchor))
        else:
            anchor = root
            relative = expanded
        if not MAGIC_CHARACTERS.intersection(relative):
            candidate = anchor / relative
            if candidate.exists():
                found.add(candidate.resolve())
            continue
        found.update(path.resolve() for path in anchor.glob(relative))
    return found


def _anchor(root: Path, value: str) -> Path:
    path = Path(value)
    if path.is_absolute():
        return path.resolve()
    return (root / path).resolve()


__all__ = [
    "base_directories",
    "expand_braces",
    "find_directories",
    "find_files",
    "positive_patterns",
    "static_base",
]

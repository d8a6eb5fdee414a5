r"""Split template files into YAML front matter and a trimmed body.

A front-matter block opens the file with a ``---`` line and closes with the
next ``---`` line. The block is parsed with ruamel.yaml's safe loader; the
remaining body has leading and trailing whitespace-only lines removed.

Example
-------
>>> matter = parse_matter("---\ntitle: Hi\n---\n\n<p>{{ title }}</p>\n\n")
>>> matter.data, matter.content
({'title': 'Hi'}, '<p>{{ title }}</p>')
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .errors import FrontMatterError

if typ.TYPE_CHECKING:
    from pathlib import Path

FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<yaml>.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)
EDGE_BLANK_LINES = re.compile(r"^(\s*(\r?\n|\r))+|(\s*(\r?\n|\r))+$")


@dc.dataclass(slots=True)
class Matter:
    """Front-matter metadata and the body that followed it."""

    data: dict[str, typ.Any]
    content: str


def _yaml_loader() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def trim_blank_lines(text: str) -> str:
    """Strip runs of whitespace-only lines from both ends of ``text``."""
    return EDGE_BLANK_LINES.sub("", text)


def parse_matter(text: str, *, path: Path | None = None) -> Matter:
    """Split ``text`` into front-matter data and trimmed body content.

    Parameters
    ----------
    text : str
        Raw file contents.
    path : Path, optional
        Source path used in error messages.

    Returns
    -------
    Matter
        Parsed metadata (empty when the file has no block) and the body.

    Raises
    ------
    FrontMatterError
        If the block is not valid YAML or does not hold a mapping.
    """
    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        return Matter(data={}, content=trim_blank_lines(text))

    try:
        loaded = _yaml_loader().load(match.group("yaml"))
    except YAMLError as exc:
        msg = f"Invalid YAML front matter in '{path}': {exc}"
        raise FrontMatterError(msg, path=path) from exc

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = (
            f"Front matter in '{path}' must be a mapping, "
            f"got {type(loaded).__name__}."
        )
        raise FrontMatterError(msg, path=path)

    body = text[match.end() :]
    return Matter(data=dict(loaded), content=trim_blank_lines(body))


def read_matter(path: Path) -> Matter:
    """Read ``path`` as UTF-8 and split it with :func:`parse_matter`."""
    return parse_matter(path.read_text(encoding="utf-8"), path=path)


__all__ = ["Matter", "parse_matter", "read_matter", "trim_blank_lines"]

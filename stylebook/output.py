"""Resolve where a rendered view is written.

Rules apply in order, each overriding the previous one:

1. ``<dest>/<collection>/<basename>``, with an empty collection for views
   directly under the views root;
2. a ``dest`` front-matter field replaces the whole path;
3. a ``dest_map`` entry for the view's collection gives
   ``<entry>/<basename>``; the empty key maps views at the views root;
4. the extension becomes the configured output extension.

A ``dest-copy`` field adds a second path that receives the same output.

Example
-------
>>> from pathlib import Path
>>> from stylebook.config import AssemblyConfig
>>> resolver = OutputResolver(AssemblyConfig(dest=Path("dist"), extension=".htm"))
>>> resolver.resolve(Path("views/forms/input.html"), "forms", {}).path
PosixPath('dist/forms/input.htm')
"""

from __future__ import annotations

import dataclasses as dc
import os
import re
import typing as typ
from pathlib import Path

from ._constants import DEST_COPY_FIELD, DEST_FIELD

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import AssemblyConfig

EXTENSION_PATTERN = re.compile(r"\.[0-9a-zA-Z]+$")


@dc.dataclass(frozen=True, slots=True)
class OutputTarget:
    """Destination of a rendered view and its optional copy."""

    path: Path
    copy_path: Path | None = None


class OutputResolver:
    """Compute output paths for views under the configured override rules."""

    def __init__(self, config: AssemblyConfig) -> None:
        self.config = config

    def resolve(
        self,
        source: Path,
        collection: str,
        data: cabc.Mapping[str, typ.Any],
    ) -> OutputTarget:
        """Return the output target for the view at ``source``.

        Parameters
        ----------
        source : Path
            The view's source file.
        collection : str
            Name of the directory grouping the view, empty at the views root.
        data : Mapping
            The view's front matter.

        Returns
        -------
        OutputTarget
            Paths relative to the project root unless configured absolute.
        """
        basename = source.name
        path = _normalize(Path(self.config.dest) / collection / basename)

        dest = data.get(DEST_FIELD)
        if dest:
            path = _normalize(Path(str(dest)))

        mapped = self.config.dest_map.get(collection)
        if mapped:
            path = _normalize(Path(mapped) / basename)

        path = path.with_name(EXTENSION_PATTERN.sub(self.config.extension, path.name))

        copy = data.get(DEST_COPY_FIELD)
        copy_path = _normalize(Path(str(copy))) if copy else None
        return OutputTarget(path=path, copy_path=copy_path)


def _normalize(path: Path) -> Path:
    """Collapse ``.`` and ``..`` segments without touching the filesystem."""
    return Path(os.path.normpath(path))


__all__ = ["OutputResolver", "OutputTarget"]

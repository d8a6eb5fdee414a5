"""Discover and parse layouts, data files, views, and docs.

Each loader takes the run configuration, expands its glob patterns, and fills
one table of the :class:`~stylebook.models.AssemblyState`. Layout includes are
the exception: they are registered straight into the template registry so
views and layouts can ``{% include %}`` them by id.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ruamel.yaml import YAML

from ._constants import NOTES_FIELD
from .discovery import base_directories, find_files
from .frontmatter import read_matter
from .models import Collection, Doc, View, item_order
from .naming import get_name, sort_by_order, to_title_case

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from .config import AssemblyConfig
    from .frontmatter import Matter
    from .models import AssemblyState
    from .registry import TemplateRegistry
    from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class ViewSource:
    """A discovered view file and the collection it belongs to."""

    path: Path
    collection: str

    @property
    def id(self) -> str:
        return get_name(self.path, preserve_numbers=True)

    def read(self) -> Matter:
        """Parse the view's front matter and body."""
        return read_matter(self.path)


def load_layouts(config: AssemblyConfig, state: AssemblyState) -> None:
    """Read every layout file into ``state.layouts`` keyed by id."""
    state.layouts = {}
    for path in find_files(config.layouts, config.root):
        state.layouts[get_name(path)] = path.read_text(encoding="utf-8")
    logger.debug("Loaded %d layouts", len(state.layouts))


def register_layout_includes(
    config: AssemblyConfig, environment: Environment, registry: TemplateRegistry
) -> None:
    """Register layout includes as named templates."""
    for path in find_files(config.layout_includes, config.root):
        source = path.read_text(encoding="utf-8")
        name = get_name(path)
        tree = environment.parse(source, name, str(path))
        registry.register(name, tree, source=source, path=path)


def load_data(config: AssemblyConfig, state: AssemblyState) -> None:
    """Parse every JSON or YAML data file into ``state.data`` keyed by id."""
    state.data = {}
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    for path in find_files(config.data, config.root):
        with path.open("r", encoding="utf-8") as handle:
            state.data[get_name(path)] = loader.load(handle)
    logger.debug("Loaded %d data files", len(state.data))


def discover_views(config: AssemblyConfig) -> list[ViewSource]:
    """Return the configured views with their collection names.

    A view's collection is the name of its directory unless that directory is
    one of the views roots, in which case the collection is empty.
    """
    roots = set(base_directories(config.views, config.root))
    sources: list[ViewSource] = []
    for path in find_files(config.views, config.root):
        collection = "" if path.parent in roots else path.parent.name
        sources.append(ViewSource(path=path, collection=collection))
    return sources


def load_views(views: list[ViewSource], state: AssemblyState) -> None:
    """Record metadata for every view that belongs to a collection."""
    state.views = {}
    for view in views:
        if not view.collection:
            continue
        matter = view.read()
        data = {
            key: value for key, value in matter.data.items() if key != NOTES_FIELD
        }
        collection = state.views.setdefault(
            view.collection, Collection(name=to_title_case(view.collection))
        )
        collection.items[view.id] = View(
            id=view.id, name=to_title_case(view.id), data=data
        )
    for collection in state.views.values():
        collection.items = sort_by_order(collection.items, item_order)
    logger.debug("Loaded views in %d collections", len(state.views))


def load_docs(
    config: AssemblyConfig, state: AssemblyState, markdown: MarkdownRenderer
) -> None:
    """Render every Markdown doc into ``state.docs`` keyed by id."""
    state.docs = {}
    for path in find_files(config.docs, config.root):
        doc_id = get_name(path)
        state.docs[doc_id] = Doc(
            id=doc_id,
            name=to_title_case(doc_id),
            content=markdown.render(path.read_text(encoding="utf-8")),
        )
    logger.debug("Rendered %d docs", len(state.docs))


__all__ = [
    "ViewSource",
    "discover_views",
    "load_data",
    "load_docs",
    "load_layouts",
    "load_views",
    "register_layout_includes",
]

"""Organise material fragments into the materials collection tree.

Fragments live under one or more fragment roots (``src/materials`` by
default). The directory holding a fragment names its collection; when that
directory itself sits inside another directory below a fragment root, the
fragment belongs to a sub-collection nested in that parent::

    src/materials/
        components/              collection "components"
            01-alert.html
            02-buttons/          sub-collection "components" > "02-buttons"
                01-primary.html

Which directories count as parents is decided once, before any file is looked
at, by :class:`CollectionHierarchy`. Every collection is stubbed before any
fragment is parsed so collections without an index fragment still appear.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from ._constants import NOTES_FIELD
from .discovery import find_directories
from .frontmatter import read_matter
from .models import Collection, Material, item_order
from .naming import get_name, namespaced_id, sort_by_order, to_title_case

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .models import AssemblyState
    from .namespacer import FragmentNamespacer
    from .registry import TemplateRegistry
    from .renderer import MarkdownRenderer

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class CollectionHierarchy:
    """Directories that can hold sub-collections, computed once per run."""

    parent_directories: frozenset[Path]

    @classmethod
    def from_patterns(
        cls, patterns: cabc.Iterable[str], root: Path
    ) -> CollectionHierarchy:
        """Collect every directory below the base of each fragment-root pattern."""
        return cls(frozenset(find_directories(patterns, root)))

    def placement(self, path: Path) -> MaterialPlacement:
        """Return where the fragment at ``path`` sits in the tree."""
        directory = path.parent
        collection = get_name(directory.name, preserve_numbers=True)
        if directory.parent in self.parent_directories:
            parent = get_name(directory.parent.name, preserve_numbers=True)
            return MaterialPlacement(collection=parent, subcollection=collection)
        return MaterialPlacement(collection=collection, subcollection=None)


@dc.dataclass(frozen=True, slots=True)
class MaterialPlacement:
    """Top-level collection key and optional sub-collection key of a fragment."""

    collection: str
    subcollection: str | None


class CollectionBuilder:
    """Build the materials tree and register every fragment as a template."""

    def __init__(
        self,
        hierarchy: CollectionHierarchy,
        *,
        namespacer: FragmentNamespacer,
        registry: TemplateRegistry,
        markdown: MarkdownRenderer,
    ) -> None:
        self.hierarchy = hierarchy
        self.namespacer = namespacer
        self.registry = registry
        self.markdown = markdown

    def build(self, files: cabc.Sequence[Path], state: AssemblyState) -> None:
        """Populate ``state.materials`` and ``state.material_data`` from ``files``.

        Parameters
        ----------
        files : Sequence[Path]
            Fragment files matched by the materials patterns.
        state : AssemblyState
            Run state; its materials tables are replaced.
        """
        state.materials = {}
        state.material_data = {}
        placements = {path: self.hierarchy.placement(path) for path in files}

        for placement in placements.values():
            self._stub(state.materials, placement)

        for path, placement in placements.items():
            self._add_material(path, placement, state)

        state.materials = sort_by_order(state.materials, item_order)
        for collection in state.materials.values():
            collection.items = sort_by_order(collection.items, item_order)
            for item in collection.items.values():
                if isinstance(item, Collection):
                    item.items = sort_by_order(item.items, item_order)
        logger.debug(
            "Registered %d materials in %d collections",
            len(state.material_data),
            len(state.materials),
        )

    @staticmethod
    def _stub(materials: dict[str, Collection], placement: MaterialPlacement) -> None:
        collection = materials.setdefault(
            placement.collection,
            Collection(name=to_title_case(get_name(placement.collection))),
        )
        if placement.subcollection is not None:
            collection.items.setdefault(
                placement.subcollection,
                Collection(name=to_title_case(get_name(placement.subcollection))),
            )

    def _add_material(
        self, path: Path, placement: MaterialPlacement, state: AssemblyState
    ) -> None:
        matter = read_matter(path)
        stem = get_name(path)
        raw_stem = get_name(path, preserve_numbers=True)
        local_data = {
            key: value for key, value in matter.data.items() if key != NOTES_FIELD
        }
        notes = matter.data.get(NOTES_FIELD)

        target = state.materials[placement.collection]
        if placement.subcollection is not None:
            material_id = f"{get_name(placement.subcollection)}.{stem}"
            key = f"{placement.subcollection}.{raw_stem}"
            target = typ.cast("Collection", target.items[placement.subcollection])
        else:
            material_id = stem
            key = raw_stem

        if namespaced_id(material_id) in state.material_data:
            logger.warning(
                "Material '%s' from %s replaces an earlier registration",
                material_id,
                path,
            )

        target.items[key] = Material(
            id=material_id,
            key=key,
            name=to_title_case(stem),
            notes=self.markdown.render(str(notes)) if notes else "",
            data=local_data,
        )
        state.material_data[namespaced_id(material_id)] = local_data

        tree = self.namespacer.namespace(
            matter.content, material_id, local_data, path=path
        )
        self.registry.register(material_id, tree, source=matter.content, path=path)


__all__ = ["CollectionBuilder", "CollectionHierarchy", "MaterialPlacement"]

"""Shared dataclasses describing an assembled style guide."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import ORDER_FIELD

if typ.TYPE_CHECKING:
    from markupsafe import Markup


@dc.dataclass(slots=True)
class Material:
    """A reusable template fragment and its metadata.

    Attributes
    ----------
    id : str
        Registered template name: ``<subcollection>.<name>`` for nested
        fragments, otherwise ``<name>``, with ordering prefixes removed.
    key : str
        Item key inside its collection, ordering prefixes preserved.
    name : str
        Title-cased display name.
    notes : Markup
        Rendered HTML from the ``notes`` front-matter field, empty if absent.
    data : dict
        Front matter without ``notes``.
    """

    id: str
    key: str
    name: str
    notes: Markup | str
    data: dict[str, typ.Any]

    @property
    def order(self) -> object:
        """Return the explicit ``order`` front-matter value, if any."""
        return self.data.get(ORDER_FIELD)


@dc.dataclass(slots=True)
class Collection:
    """A named group of materials, views, or nested collections."""

    name: str
    items: dict[str, Material | Collection | View] = dc.field(default_factory=dict)
    order: object = None


@dc.dataclass(slots=True)
class View:
    """Metadata for a page template listed under its collection."""

    id: str
    name: str
    data: dict[str, typ.Any]

    @property
    def order(self) -> object:
        """Return the explicit ``order`` front-matter value, if any."""
        return self.data.get(ORDER_FIELD)


@dc.dataclass(slots=True)
class Doc:
    """A Markdown document rendered to HTML."""

    id: str
    name: str
    content: Markup | str


@dc.dataclass(slots=True)
class AssemblyState:
    """Tables rebuilt from scratch at the start of every run.

    Attributes
    ----------
    layouts : dict[str, str]
        Raw layout templates keyed by id.
    data : dict[str, object]
        Parsed data files keyed by id.
    materials : dict[str, Collection]
        Materials collection tree.
    material_data : dict[str, dict]
        Each material's front matter keyed by its namespaced id.
    views : dict[str, Collection]
        Views grouped by collection.
    docs : dict[str, Doc]
        Rendered docs keyed by id.
    """

    layouts: dict[str, str] = dc.field(default_factory=dict)
    data: dict[str, typ.Any] = dc.field(default_factory=dict)
    materials: dict[str, Collection] = dc.field(default_factory=dict)
    material_data: dict[str, dict[str, typ.Any]] = dc.field(default_factory=dict)
    views: dict[str, Collection] = dc.field(default_factory=dict)
    docs: dict[str, Doc] = dc.field(default_factory=dict)


def item_order(item: Material | Collection | View) -> object:
    """Return the explicit ordering value of a collection item."""
    return item.order


__all__ = ["AssemblyState", "Collection", "Doc", "Material", "View", "item_order"]

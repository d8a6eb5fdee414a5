"""High-level orchestration for assembling a style guide.

:class:`Assembler` owns everything one build needs: the Jinja environment, the
template registry acting as its loader, and the :class:`AssemblyState` tables.
``run`` performs one synchronous pass:

1. load layouts and register layout includes;
2. load data files;
3. build the materials tree, namespacing and registering every fragment;
4. load views and docs;
5. render every view inside its layout and write it out.

State tables are rebuilt on every ``run``; registered templates and helpers stay
with the instance and are overwritten when registered again. Separate
instances share nothing.

Example
-------
>>> from pathlib import Path
>>> from stylebook import assemble
>>> assemble({"root": Path("styleguide"), "dest": "dist"})  # doctest: +SKIP
[PosixPath('dist/index.html'), ...]
"""

from __future__ import annotations

import logging
import typing as typ

from jinja2 import Environment, TemplateError

from ._constants import BASEURL_FIELD, BODY_MARKER, LAYOUT_FIELD, SUBCOLLECTION_BASEURL
from .collection_builder import CollectionBuilder, CollectionHierarchy
from .config import AssemblyConfig, build_assembly_config
from .context import ContextBuilder
from .discovery import find_files
from .errors import LayoutNotFoundError, ViewRenderError, handle_error
from .helpers import MaterialHelper, register_builtin_helpers, register_user_helpers
from .loaders import (
    discover_views,
    load_data,
    load_docs,
    load_layouts,
    load_views,
    register_layout_includes,
)
from .models import AssemblyState
from .namespacer import FragmentNamespacer
from .output import OutputResolver
from .registry import TemplateRegistry
from .renderer import HtmlBeautifier, MarkdownRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .loaders import ViewSource

logger = logging.getLogger(__name__)


def wrap_page(page: str, layout: str) -> str:
    """Insert ``page`` at the first ``{% body %}`` marker of ``layout``."""
    return BODY_MARKER.sub(lambda _match: page, layout, count=1)


class Assembler:
    """Assemble views, materials, data, and docs into rendered pages."""

    def __init__(self, config: AssemblyConfig) -> None:
        """Initialize the assembler and its template environment.

        Parameters
        ----------
        config : AssemblyConfig
            Resolved configuration threaded through every component.
        """
        self.config = config
        self.state = AssemblyState()
        self.registry = TemplateRegistry()
        self.environment = Environment(
            loader=self.registry,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.markdown = MarkdownRenderer(config.pygments_style)
        self.beautifier = HtmlBeautifier(config.beautifier)
        self.context_builder = ContextBuilder(config, self.state)
        self.namespacer = FragmentNamespacer(self.environment)
        self.output = OutputResolver(config)
        self.views: list[ViewSource] = []

    def run(self) -> list[Path]:
        """Load every source and write every view, returning the written paths."""
        self.setup()
        return self.assemble()

    def setup(self) -> None:
        """Register helpers and rebuild the assembly state from disk."""
        self._register_helpers()
        load_layouts(self.config, self.state)
        register_layout_includes(self.config, self.environment, self.registry)
        load_data(self.config, self.state)
        self._build_materials()
        self.views = discover_views(self.config)
        load_views(self.views, self.state)
        load_docs(self.config, self.state, self.markdown)

    def assemble(self) -> list[Path]:
        """Render every discovered view into the output tree.

        Returns
        -------
        list[Path]
            Every file written, copies included, in view order.

        Raises
        ------
        LayoutNotFoundError
            If a view selects a layout that was not loaded.
        ViewRenderError
            If a view's template fails to compile or render.
        """
        self.config.resolve(self.config.dest).mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for view in self.views:
            written.extend(self._render_view(view))
        logger.info("Assembled %d views into %s", len(self.views), self.config.dest)
        return written

    def _register_helpers(self) -> None:
        helper = MaterialHelper(self.environment, self.context_builder, self.beautifier)
        register_builtin_helpers(
            self.environment,
            materials_key=self.config.keys.materials,
            material_helper=helper,
            markdown=self.markdown,
        )
        register_user_helpers(self.environment, self.config.helpers)

    def _build_materials(self) -> None:
        hierarchy = CollectionHierarchy.from_patterns(
            self.config.materials, self.config.root
        )
        builder = CollectionBuilder(
            hierarchy,
            namespacer=self.namespacer,
            registry=self.registry,
            markdown=self.markdown,
        )
        builder.build(find_files(self.config.materials, self.config.root), self.state)

    def _render_view(self, view: ViewSource) -> list[Path]:
        matter = view.read()
        data = dict(matter.data)
        if view.collection:
            data[BASEURL_FIELD] = SUBCOLLECTION_BASEURL

        layout_id = data.get(LAYOUT_FIELD) or self.config.layout
        layout = self.state.layouts.get(str(layout_id))
        if layout is None:
            msg = f"Layout '{layout_id}' used by '{view.path}' was not found."
            raise LayoutNotFoundError(msg, path=view.path)

        target = self.output.resolve(view.path, view.collection, data)
        context = self.context_builder.build(data)
        try:
            template = self.environment.from_string(wrap_page(matter.content, layout))
            html = template.render(context)
        except TemplateError as exc:
            logger.error("Error while compiling template %s", view.path)
            msg = f"Error while compiling template '{view.path}': {exc}"
            raise ViewRenderError(msg, path=view.path) from exc

        written = [self._write(target.path, html)]
        if target.copy_path is not None:
            written.append(self._write(target.copy_path, html))
        return written

    def _write(self, path: Path, html: str) -> Path:
        output_path = self.config.resolve(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(html, encoding="utf-8")
        logger.debug("Wrote %s", output_path)
        return output_path


def assemble(
    config: AssemblyConfig | cabc.Mapping[str, typ.Any] | None = None,
) -> list[Path]:
    """Run one assembly pass under the configured error policy.

    Parameters
    ----------
    config : AssemblyConfig or Mapping, optional
        A resolved configuration or user options merged over the defaults.

    Returns
    -------
    list[Path]
        Files written; empty when the run failed and the error was handled
        by ``on_error`` or ``log_errors``.

    Raises
    ------
    SystemExit
        When the run fails and neither ``on_error`` nor ``log_errors`` is
        configured.
    """
    resolved = (
        config if isinstance(config, AssemblyConfig) else build_assembly_config(config)
    )
    try:
        return Assembler(resolved).run()
    except Exception as exc:  # noqa: BLE001 - invocation boundary
        handle_error(exc, resolved)
        return []


__all__ = ["Assembler", "assemble", "wrap_page"]

"""Named-template registry backing one assembler's Jinja environment.

Materials and layout includes are registered here as parsed Jinja trees, so the
namespacing rewrite operates on the syntax tree and the rewritten tree is what
gets compiled. The registry is the environment's loader: ``{% include %}``,
``{% import %}``, and the material helper all resolve names through it, and
Jinja's template cache handles compile-on-first-use.

Registering a name again replaces the previous entry; the cached compiled
template is invalidated through the loader's ``uptodate`` hook.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from jinja2 import BaseLoader, TemplateNotFound

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment, Template, nodes


@dc.dataclass(slots=True, eq=False)
class RegisteredTemplate:
    """A parsed template awaiting compilation."""

    name: str
    tree: nodes.Template
    source: str
    filename: str | None = None


class TemplateRegistry(BaseLoader):
    """Jinja loader serving templates registered during an assembly run."""

    has_source_access = True

    def __init__(self) -> None:
        self._entries: dict[str, RegisteredTemplate] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def register(
        self,
        name: str,
        tree: nodes.Template,
        *,
        source: str,
        path: Path | None = None,
    ) -> RegisteredTemplate:
        """Register ``tree`` under ``name``, replacing any earlier entry.

        Parameters
        ----------
        name : str
            Lookup name used by includes and the material helper.
        tree : jinja2.nodes.Template
            Parsed (and possibly rewritten) template tree.
        source : str
            Original template text, kept for tracebacks and debugging.
        path : Path, optional
            File the template was read from.

        Returns
        -------
        RegisteredTemplate
            The stored entry.
        """
        entry = RegisteredTemplate(
            name=name,
            tree=tree,
            source=source,
            filename=str(path) if path is not None else None,
        )
        self._entries[name] = entry
        return entry

    def get(self, name: str) -> RegisteredTemplate | None:
        """Return the entry registered under ``name``, if any."""
        return self._entries.get(name)

    def get_source(
        self, environment: Environment, template: str
    ) -> tuple[str, str | None, cabc.Callable[[], bool]]:
        """Return the original source of ``template`` for Jinja's debug hooks."""
        entry = self.get(template)
        if entry is None:
            raise TemplateNotFound(template)
        return entry.source, entry.filename, self._uptodate(template, entry)

    def list_templates(self) -> list[str]:
        """Return every registered template name in sorted order."""
        return sorted(self._entries)

    def load(
        self,
        environment: Environment,
        name: str,
        globals: cabc.MutableMapping[str, typ.Any] | None = None,  # noqa: A002
    ) -> Template:
        """Compile the registered tree for ``name`` into a template."""
        entry = self.get(name)
        if entry is None:
            raise TemplateNotFound(name)
        if globals is None:
            globals = {}  # noqa: A001
        code = environment.compile(entry.tree, name, entry.filename)
        return environment.template_class.from_code(
            environment, code, globals, self._uptodate(name, entry)
        )

    def _uptodate(
        self, name: str, entry: RegisteredTemplate
    ) -> cabc.Callable[[], bool]:
        return lambda: self.get(name) is entry


__all__ = ["RegisteredTemplate", "TemplateRegistry"]

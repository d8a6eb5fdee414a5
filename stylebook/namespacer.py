"""Qualify a fragment's references to its own front matter.

A material such as ``components/button.html``::

    ---
    label: Click me
    ---
    <button>{{ label }}</button>

is usually rendered inside a page whose context has no ``label``. Before the
fragment is registered, every load of a front-matter key is rewritten to a
lookup of that key inside the fragment's namespaced data (here
``context["button"]["label"]``), which the context builder exposes for every
render.

The rewrite works on the parsed Jinja tree rather than on template text:

- only variable loads are touched, so string literals, attribute names, filter
  names, and keyword-argument names never change;
- names bound inside the fragment (``for`` targets, ``set``, macro and
  call-block arguments, ``with`` targets, imports, ``loop``) shadow
  front-matter keys within their scope;
- a key set inside a conditional branch is first set from the namespaced
  data, so a branch that does not run leaves the front-matter value;
- the replacement is a subscript on the render context, never a new variable
  name, so rewriting one key can not produce a match for another.

Example
-------
>>> from jinja2 import Environment
>>> env = Environment()
>>> tree = FragmentNamespacer(env).namespace(
...     "<b>{{ label }}</b>", "buttons.primary", {"label": "Go"}
... )
>>> env.from_string(tree).render({"buttons-primary": {"label": "Go"}})
'<b>Go</b>'
"""

from __future__ import annotations

import typing as typ

from jinja2 import nodes

from .naming import namespaced_id

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from jinja2 import Environment

_SCOPED_BODY_NODES = (
    nodes.Block,
    nodes.Scope,
    nodes.OverlayScope,
    nodes.ScopedEvalContextModifier,
)
_CALLABLE_LOCALS = frozenset({"varargs", "kwargs", "caller"})


class FragmentNamespacer:
    """Parse fragments and qualify references to their front-matter keys."""

    def __init__(self, environment: Environment) -> None:
        self.environment = environment

    def namespace(
        self,
        source: str,
        material_id: str,
        data: cabc.Mapping[str, typ.Any],
        *,
        path: Path | None = None,
    ) -> nodes.Template:
        """Return the parsed tree of ``source`` with local keys qualified.

        Parameters
        ----------
        source : str
            Fragment body without front matter.
        material_id : str
            Dotted material id; dots become dashes in the namespace key.
        data : Mapping
            The fragment's front matter (without ``notes``).
        path : Path, optional
            Source file, reported in syntax errors.

        Returns
        -------
        jinja2.nodes.Template
            The rewritten tree, ready for :class:`~stylebook.registry.TemplateRegistry`.

        Raises
        ------
        jinja2.TemplateSyntaxError
            If ``source`` is not a valid template.
        """
        filename = str(path) if path is not None else None
        tree = self.environment.parse(source, material_id, filename)
        keys = frozenset(str(key) for key in data)
        if keys:
            _ScopedRewriter(namespaced_id(material_id), keys).rewrite(tree)
            tree.set_environment(self.environment)
        return tree


class _ScopedRewriter:
    """Walk a template tree, replacing unshadowed loads of ``keys``."""

    def __init__(self, namespace: str, keys: frozenset[str]) -> None:
        self.namespace = namespace
        self.keys = keys

    def rewrite(self, tree: nodes.Template) -> None:
        tree.body = self._visit_list(tree.body, set())

    def _visit(self, node: nodes.Node, bound: set[str]) -> nodes.Node:
        if isinstance(node, nodes.Name):
            if node.ctx == "load" and node.name in self.keys and node.name not in bound:
                return self._qualified(node)
            return node
        if isinstance(node, nodes.For):
            return self._visit_for(node, bound)
        if isinstance(node, nodes.Macro | nodes.CallBlock):
            return self._visit_callable(node, bound)
        if isinstance(node, nodes.With):
            node.values = self._visit_list(node.values, bound)
            inner = bound.union(*(_target_names(target) for target in node.targets))
            node.body = self._visit_list(node.body, inner)
            return node
        if isinstance(node, nodes.Assign):
            node.node = self._visit(node.node, bound)
            bound.update(_target_names(node.target))
            return node
        if isinstance(node, nodes.AssignBlock):
            node.body = self._visit_list(node.body, set(bound))
            if node.filter is not None:
                node.filter = self._visit(node.filter, bound)
            bound.update(_target_names(node.target))
            return node
        if isinstance(node, nodes.Import):
            node.template = self._visit(node.template, bound)
            bound.add(node.target)
            return node
        if isinstance(node, nodes.FromImport):
            node.template = self._visit(node.template, bound)
            for name in node.names:
                bound.add(name[1] if isinstance(name, tuple) else name)
            return node
        if isinstance(node, _SCOPED_BODY_NODES):
            return self._visit_children(node, set(bound))
        return self._visit_children(node, bound)

    def _visit_for(self, node: nodes.For, bound: set[str]) -> nodes.For:
        node.iter = self._visit(node.iter, bound)
        inner = bound | _target_names(node.target) | {"loop"}
        node.body = self._visit_list(node.body, set(inner))
        if node.test is not None:
            node.test = self._visit(node.test, set(inner))
        node.else_ = self._visit_list(node.else_, bound)
        return node

    def _visit_callable(
        self, node: nodes.Macro | nodes.CallBlock, bound: set[str]
    ) -> nodes.Node:
        node.defaults = self._visit_list(node.defaults, bound)
        if isinstance(node, nodes.CallBlock):
            node.call = self._visit(node.call, bound)
        inner = bound | {arg.name for arg in node.args} | _CALLABLE_LOCALS
        node.body = self._visit_list(node.body, inner)
        if isinstance(node, nodes.Macro):
            bound.add(node.name)
        return node

    def _visit_children(self, node: nodes.Node, bound: set[str]) -> nodes.Node:
        for field, value in node.iter_fields():
            if isinstance(value, nodes.Node):
                setattr(node, field, self._visit(value, bound))
            elif isinstance(value, list):
                setattr(node, field, self._visit_list(value, bound))
        return node

    def _visit_if(self, node: nodes.If, bound: set[str]) -> list[nodes.Node]:
        """Visit a conditional, preloading keys that only some branches set.

        A key assigned in any branch becomes a local name for the rest of the
        scope, so it is first set from the namespaced data. Skipped branches
        then leave the front-matter value in place.
        """
        assigned = sorted((_branch_assignments(node) & self.keys) - bound)
        preload = [
            nodes.Assign(
                nodes.Name(key, "store", lineno=node.lineno),
                self._qualified(nodes.Name(key, "load", lineno=node.lineno)),
                lineno=node.lineno,
            )
            for key in assigned
        ]
        bound.update(assigned)
        node.test = self._visit(node.test, bound)
        node.body = self._visit_list(node.body, set(bound))
        for branch in node.elif_:
            branch.test = self._visit(branch.test, bound)
            branch.body = self._visit_list(branch.body, set(bound))
        node.else_ = self._visit_list(node.else_, set(bound))
        return [*preload, node]

    def _visit_list(self, values: list[typ.Any], bound: set[str]) -> list[typ.Any]:
        visited: list[typ.Any] = []
        for value in values:
            if isinstance(value, nodes.If):
                visited.extend(self._visit_if(value, bound))
            elif isinstance(value, nodes.Node):
                visited.append(self._visit(value, bound))
            else:
                visited.append(value)
        return visited

    def _qualified(self, node: nodes.Name) -> nodes.Getitem:
        lineno = node.lineno
        scope = nodes.Getitem(
            nodes.ContextReference(lineno=lineno),
            nodes.Const(self.namespace, lineno=lineno),
            "load",
            lineno=lineno,
        )
        return nodes.Getitem(
            scope, nodes.Const(node.name, lineno=lineno), "load", lineno=lineno
        )


def _target_names(target: nodes.Node) -> set[str]:
    """Return the variable names bound by an assignment or loop target."""
    if isinstance(target, nodes.Name):
        return {target.name}
    if isinstance(target, nodes.Tuple):
        names: set[str] = set()
        for item in target.items:
            names |= _target_names(item)
        return names
    return set()


def _branch_assignments(node: nodes.If) -> set[str]:
    """Return names set directly in any branch of ``node``.

    Nested conditionals are included; loops, macros, and other scoped bodies
    keep their assignments to themselves.
    """
    names: set[str] = set()
    branches = [node.body, node.else_, *(branch.body for branch in node.elif_)]
    for body in branches:
        for child in body:
            if isinstance(child, nodes.Assign | nodes.AssignBlock):
                names |= _target_names(child.target)
            elif isinstance(child, nodes.If):
                names |= _branch_assignments(child)
    return names


__all__ = ["FragmentNamespacer"]

"""Built-in template helpers registered on every assembler environment.

``material`` renders a registered fragment in place::

    {{ material("02-buttons.01-primary", {"label": "Save"}, size="lg") }}

Its name follows the materials key: with ``keys.materials = "patterns"`` the
helper is ``pattern``. ``markdown`` renders Markdown text and is available both
as a global and as a filter.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import inflect
from jinja2.runtime import Context
from markupsafe import Markup

from .naming import strip_order_prefixes

if typ.TYPE_CHECKING:
    from jinja2 import Environment

    from .context import ContextBuilder
    from .renderer import HtmlBeautifier, MarkdownRenderer

_INFLECTOR = inflect.engine()


def helper_name(materials_key: str) -> str:
    """Return the singular form of ``materials_key`` used as the helper name."""
    singular = _INFLECTOR.singular_noun(materials_key)
    return singular or materials_key


class MaterialHelper:
    """Render a registered fragment against a freshly built context."""

    def __init__(
        self,
        environment: Environment,
        context_builder: ContextBuilder,
        beautifier: HtmlBeautifier,
    ) -> None:
        self.environment = environment
        self.context_builder = context_builder
        self.beautifier = beautifier

    def __call__(
        self,
        name: str,
        context: cabc.Mapping[str, typ.Any] | None = None,
        **hash_args: typ.Any,
    ) -> Markup:
        """Render the fragment referenced by ``name``.

        Parameters
        ----------
        name : str
            Material id, optionally with ordering prefixes on any segment.
        context : Mapping, optional
            Lowest-precedence data for the render.
        **hash_args
            Highest-precedence data for the render.

        Returns
        -------
        Markup
            Pretty-printed fragment markup.

        Raises
        ------
        jinja2.TemplateNotFound
            If no material is registered under the stripped name.
        """
        template = self.environment.get_template(strip_order_prefixes(name))
        rendered = template.render(
            self.context_builder.build(_as_mapping(context), hash_args)
        )
        return Markup(self.beautifier.beautify(rendered.lstrip()))


def register_builtin_helpers(
    environment: Environment,
    *,
    materials_key: str,
    material_helper: MaterialHelper,
    markdown: MarkdownRenderer,
) -> None:
    """Register ``material`` and ``markdown`` on ``environment``."""
    environment.globals[helper_name(materials_key)] = material_helper
    environment.globals["markdown"] = markdown.render
    environment.filters["markdown"] = markdown.render


def register_user_helpers(
    environment: Environment,
    helpers: cabc.Mapping[str, cabc.Callable[..., typ.Any]],
) -> None:
    """Register user helpers as globals, replacing same-named built-ins."""
    for name, helper in helpers.items():
        environment.globals[name] = helper


def _as_mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    """Return ``value`` when it is a mapping, an empty dict otherwise.

    Undefined variables passed as the context argument render as empty.
    """
    if isinstance(value, cabc.Mapping):
        return value
    if isinstance(value, Context):
        return value.get_all()
    return {}


__all__ = [
    "MaterialHelper",
    "helper_name",
    "register_builtin_helpers",
    "register_user_helpers",
]

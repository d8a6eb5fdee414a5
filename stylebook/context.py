"""Merge every data source into the single context a template renders with."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import AssemblyConfig
    from .models import AssemblyState


class ContextBuilder:
    """Build render contexts from page data and the current assembly state.

    Sources are merged shallowly, each overwriting same-named top-level keys
    of the ones before it:

    1. page data (the view's front matter, or the helper's context argument);
    2. data files;
    3. namespaced material data;
    4. ``build_data`` from the configuration;
    5. the materials tree under ``keys.materials``;
    6. the views tree under ``keys.views``;
    7. the docs tree under ``keys.docs``;
    8. extra keyword arguments passed by a helper call.
    """

    def __init__(self, config: AssemblyConfig, state: AssemblyState) -> None:
        self.config = config
        self.state = state

    def build(
        self,
        data: cabc.Mapping[str, typ.Any] | None = None,
        extra: cabc.Mapping[str, typ.Any] | None = None,
    ) -> dict[str, typ.Any]:
        """Return a new context dict for one render.

        Examples
        --------
        >>> from stylebook.config import AssemblyConfig
        >>> from stylebook.models import AssemblyState
        >>> state = AssemblyState(data={"title": "A"})
        >>> config = AssemblyConfig(build_data={"title": "B"})
        >>> ContextBuilder(config, state).build({"title": "C"})["title"]
        'B'
        """
        keys = self.config.keys
        context: dict[str, typ.Any] = {}
        context.update(data or {})
        context.update(self.state.data)
        context.update(self.state.material_data)
        context.update(self.config.build_data)
        context[keys.materials] = self.state.materials
        context[keys.views] = self.state.views
        context[keys.docs] = self.state.docs
        context.update(extra or {})
        return context


__all__ = ["ContextBuilder"]

"""Load assembly options from YAML or mappings into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    PATTERN_OPTIONS,
    _as_mapping,
    _as_path,
    _as_pattern_list,
    _merge_beautifier,
    _merge_keys,
    _normalize_option_names,
)
from .models import AssemblyConfig, AssemblyConfigError

logger = logging.getLogger(__name__)

_FIELD_NAMES = frozenset(field.name for field in dc.fields(AssemblyConfig))


def build_assembly_config(
    options: typ.Mapping[str, typ.Any] | None = None,
    *,
    root: Path | None = None,
) -> AssemblyConfig:
    """Merge user ``options`` over the defaults.

    Parameters
    ----------
    options : Mapping, optional
        User options using either dataclass field names (``dest_map``) or
        their camelCase spelling (``destMap``). ``keys`` and ``beautifier``
        merge field by field; every other option replaces its default.
    root : Path, optional
        Fallback project root when ``options`` does not name one; relative
        ``root`` options resolve against it.

    Returns
    -------
    AssemblyConfig
        The resolved configuration.

    Raises
    ------
    AssemblyConfigError
        If an option has the wrong shape (for example a mapping where a
        pattern list is expected).

    Examples
    --------
    >>> config = build_assembly_config({"destMap": {"forms": "out/f"}})
    >>> config.dest_map
    {'forms': 'out/f'}
    """
    normalized = _normalize_option_names(options or {})
    base = AssemblyConfig()
    values: dict[str, typ.Any] = {}

    for name, value in normalized.items():
        if name not in _FIELD_NAMES:
            logger.debug("Ignoring unknown assembly option '%s'", name)
            continue
        if value is None and name not in {"on_error"}:
            continue
        if name in PATTERN_OPTIONS:
            values[name] = _as_pattern_list(name, value)
        elif name == "keys":
            values[name] = _merge_keys(base.keys, _as_mapping(name, value))
        elif name == "beautifier":
            values[name] = _merge_beautifier(
                base.beautifier, _as_mapping(name, value)
            )
        elif name in {"build_data", "helpers"}:
            values[name] = _as_mapping(name, value)
        elif name == "dest_map":
            values[name] = {
                str(key): str(target)
                for key, target in _as_mapping(name, value).items()
            }
        elif name in {"dest", "root"}:
            values[name] = _as_path(value)
        elif name == "on_error":
            if value is not None and not callable(value):
                msg = "Option 'on_error' must be callable."
                raise AssemblyConfigError(msg)
            values[name] = value
        elif name == "log_errors":
            values[name] = bool(value)
        else:
            values[name] = str(value)

    fallback_root = (root or Path.cwd()).resolve()
    configured_root = values.get("root")
    if configured_root is None:
        values["root"] = fallback_root
    elif not configured_root.is_absolute():
        values["root"] = (fallback_root / configured_root).resolve()

    return dc.replace(base, **values)


def load_assembly_config(
    path: Path, overrides: typ.Mapping[str, typ.Any] | None = None
) -> AssemblyConfig:
    """Load the YAML file describing an assembly run.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration (for example,
        ``stylebook.yaml``). Relative paths inside it resolve against the
        file's directory.
    overrides : Mapping, optional
        Options applied on top of the file, typically from the command line.

    Returns
    -------
    AssemblyConfig
        The resolved configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    AssemblyConfigError
        If the top-level YAML structure is not a mapping or an option has the
        wrong shape.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise AssemblyConfigError(msg)

    raw: dict[str, typ.Any] = _normalize_option_names(loaded)
    if overrides:
        raw.update(_normalize_option_names(overrides))
    logger.debug("Loaded assembly configuration from %s", path)
    return build_assembly_config(raw, root=path.resolve().parent)


__all__ = ["build_assembly_config", "load_assembly_config"]

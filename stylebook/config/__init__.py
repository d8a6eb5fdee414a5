"""Load and validate assembly configuration for stylebook runs.

This subpackage merges user options (from a YAML file, the command line, or a
plain mapping) over the assembler defaults and produces a typed
:class:`AssemblyConfig` that every component receives through its constructor.
The entry points are :func:`load_assembly_config` for YAML files and
:func:`build_assembly_config` for in-process mappings.

Examples
--------
>>> from pathlib import Path
>>> from stylebook.config import load_assembly_config
>>> config = load_assembly_config(Path("stylebook.yaml"))  # doctest: +SKIP
>>> config.keys.materials  # doctest: +SKIP
'materials'
"""

from .loader import build_assembly_config, load_assembly_config
from .models import (
    AssemblyConfig,
    AssemblyConfigError,
    BeautifierOptions,
    CollectionKeys,
)

__all__ = [
    "AssemblyConfig",
    "AssemblyConfigError",
    "BeautifierOptions",
    "CollectionKeys",
    "build_assembly_config",
    "load_assembly_config",
]

"""Assemble UI style guides from materials, views, data, and docs.

This package discovers template fragments ("materials"), namespaces their
local data so they nest safely, merges data sources into per-page contexts,
and renders every view through Jinja into the output directory.

Exports
-------
- ``assemble``: Run one assembly pass under the configured error policy.
- ``Assembler``: The orchestrator behind ``assemble``.
- ``AssemblyConfig`` / ``build_assembly_config`` / ``load_assembly_config``:
  Configuration types and loaders.
- ``app`` / ``main``: The Cyclopts CLI.

Examples
--------
>>> from stylebook import assemble
>>> assemble({"dest": "dist"})  # doctest: +SKIP
[PosixPath('/site/dist/index.html')]
"""

from __future__ import annotations

from .assembler import Assembler, assemble
from .cli import app, main
from .config import AssemblyConfig, build_assembly_config, load_assembly_config

__all__ = [
    "Assembler",
    "AssemblyConfig",
    "app",
    "assemble",
    "build_assembly_config",
    "load_assembly_config",
    "main",
]

"""Shared fixtures for building style-guide source trees under ``tmp_path``."""

from __future__ import annotations

import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

if typ.TYPE_CHECKING:
    import collections.abc as cabc

WriteTree = typ.Callable[[typ.Mapping[str, str]], Path]


def write_tree(root: Path, files: cabc.Mapping[str, str]) -> Path:
    """Write ``files`` (relative path -> dedented text) beneath ``root``."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text).lstrip("\n"), encoding="utf-8")
    return root


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a resolved, empty project directory."""
    root = tmp_path.resolve() / "project"
    root.mkdir()
    return root


@pytest.fixture
def write_files(project_root: Path) -> WriteTree:
    """Return a callable writing a mapping of files into the project root."""

    def _write(files: typ.Mapping[str, str]) -> Path:
        return write_tree(project_root, files)

    return _write


STYLE_GUIDE_FILES: dict[str, str] = {
    "src/views/layouts/default.html": (
        '<html><body>{% include "nav" %}{% body %}</body></html>\n'
    ),
    "src/views/layouts/includes/nav.html": "<nav>{{ site.name }}</nav>\n",
    "src/data/site.yml": "name: Kit\n",
    "src/materials/components/01-alert.html": """
        ---
        order: 1
        message: Careful
        notes: Use **sparingly**.
        ---

        <div class="alert">{{ message }}</div>

        """,
    "src/materials/components/02-buttons/01-primary.html": """
        ---
        label: Save
        ---
        <button class="primary">{{ label }}</button>
        """,
    "src/materials/components/02-buttons/02-secondary.html": """
        ---
        label: Cancel
        ---
        <button class="secondary">{{ label }}</button>
        """,
    "src/materials/structures/badge.html": "<span class=\"badge\">{{ text }}</span>\n",
    "src/views/index.html": """
        ---
        title: Home
        ---
        <h1>{{ title }}</h1>{{ material("02-buttons.01-primary") }}
        """,
    "src/views/pages/detail.html": """
        ---
        title: Detail
        dest-copy: dist/copies/detail.html
        ---
        <a href="{{ baseurl }}/index.html">{{ title }}</a>{% include "alert" %}
        """,
    "src/docs/getting-started.md": "# Start\n\nUse **kits**.\n",
}


@pytest.fixture
def style_guide(write_files: WriteTree) -> Path:
    """Write a small but complete style guide and return its root."""
    return write_files(STYLE_GUIDE_FILES)

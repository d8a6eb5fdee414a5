"""Unit tests for assembly configuration loading.

These tests cover default values, option aliases, the field-by-field merge of
``keys`` and ``beautifier``, validation failures, and YAML loading relative to
the configuration file.

Usage
-----
Run ``pytest tests/test_config.py -v``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from stylebook.config import (
    AssemblyConfig,
    AssemblyConfigError,
    build_assembly_config,
    load_assembly_config,
)


def test_defaults(tmp_path: Path) -> None:
    """Without options the conventional ``src/`` layout is used."""
    config = build_assembly_config(root=tmp_path)
    assert config.layout == "default"
    assert config.views == ["src/views/**/*", "!src/views/layouts/**"]
    assert config.materials == ["src/materials/**/*"]
    assert config.data == ["src/data/**/*.{json,yml,yaml}"]
    assert config.docs == ["src/docs/**/*.md"]
    assert config.dest == Path("dist")
    assert config.extension == ".html"
    assert (config.keys.materials, config.keys.views, config.keys.docs) == (
        "materials",
        "views",
        "docs",
    )
    assert config.beautifier.indent == "\t"
    assert config.on_error is None
    assert config.log_errors is False
    assert config.root == tmp_path.resolve()


def test_camel_case_aliases(tmp_path: Path) -> None:
    """camelCase spellings map onto the snake_case fields."""
    config = build_assembly_config(
        {
            "layoutIncludes": "partials/*",
            "buildData": {"env": "prod"},
            "destMap": {"forms": Path("out/forms")},
            "logErrors": 1,
        },
        root=tmp_path,
    )
    assert config.layout_includes == ["partials/*"]
    assert config.build_data == {"env": "prod"}
    assert config.dest_map == {"forms": "out/forms"}
    assert config.log_errors is True


def test_keys_and_beautifier_merge_field_by_field(tmp_path: Path) -> None:
    """Partial ``keys`` and ``beautifier`` mappings keep other defaults."""
    config = build_assembly_config(
        {
            "keys": {"materials": "patterns"},
            "beautifier": {"indent_with_tabs": False, "indent_size": 4},
        },
        root=tmp_path,
    )
    assert config.keys.materials == "patterns"
    assert config.keys.views == "views"
    assert config.beautifier.indent == "\t" * 4
    options = build_assembly_config(
        {"beautifier": {"indent_with_tabs": False, "indent_char": " "}},
        root=tmp_path,
    ).beautifier
    assert options.indent == " "


def test_unknown_options_are_ignored(tmp_path: Path) -> None:
    """Options without a matching field do not fail the run."""
    config = build_assembly_config({"flavour": "vanilla"}, root=tmp_path)
    assert config == build_assembly_config(root=tmp_path)


def test_relative_root_resolves_against_fallback(tmp_path: Path) -> None:
    """A relative ``root`` option is anchored at the fallback root."""
    config = build_assembly_config({"root": "site"}, root=tmp_path)
    assert config.root == (tmp_path / "site").resolve()
    assert config.resolve("dist/index.html") == config.root / "dist/index.html"
    assert config.resolve(tmp_path) == tmp_path


@pytest.mark.parametrize(
    ("options", "message"),
    [
        ({"views": {"a": 1}}, "pattern"),
        ({"on_error": "print"}, "callable"),
        ({"build_data": ["a"]}, "mapping"),
    ],
)
def test_invalid_options_raise(
    tmp_path: Path, options: dict[str, object], message: str
) -> None:
    """Options with the wrong shape raise AssemblyConfigError."""
    with pytest.raises(AssemblyConfigError, match=message):
        build_assembly_config(options, root=tmp_path)


def test_load_from_yaml_uses_file_directory(tmp_path: Path) -> None:
    """Relative paths in a config file resolve against its directory."""
    config_path = tmp_path / "stylebook.yaml"
    config_path.write_text(
        "dest: public\n"
        "materials:\n"
        "  - src/patterns/**/*\n"
        "keys:\n"
        "  materials: patterns\n"
        "buildData:\n"
        "  version: 2\n",
        encoding="utf-8",
    )
    config = load_assembly_config(config_path)
    assert isinstance(config, AssemblyConfig)
    assert config.root == tmp_path.resolve()
    assert config.dest == Path("public")
    assert config.materials == ["src/patterns/**/*"]
    assert config.keys.materials == "patterns"
    assert config.build_data == {"version": 2}


def test_load_applies_overrides(tmp_path: Path) -> None:
    """Overrides replace values read from the file."""
    config_path = tmp_path / "stylebook.yaml"
    config_path.write_text("dest: public\nlogErrors: false\n", encoding="utf-8")
    config = load_assembly_config(
        config_path, {"dest": Path("elsewhere"), "log_errors": True}
    )
    assert config.dest == Path("elsewhere")
    assert config.log_errors is True


def test_load_missing_file(tmp_path: Path) -> None:
    """A missing configuration file is reported."""
    with pytest.raises(FileNotFoundError, match="not found"):
        load_assembly_config(tmp_path / "absent.yaml")


def test_load_rejects_non_mapping(tmp_path: Path) -> None:
    """The YAML document must be a mapping."""
    config_path = tmp_path / "stylebook.yaml"
    config_path.write_text("- dest\n", encoding="utf-8")
    with pytest.raises(AssemblyConfigError, match="mapping"):
        load_assembly_config(config_path)

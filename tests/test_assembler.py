"""Integration tests for assembling a complete style guide.

Each test writes a source tree under ``tmp_path``, runs the assembler against
it, and parses the written pages with BeautifulSoup. Together they cover
layout wrapping, material rendering through the helper, the collection trees
exposed to views, output placement, re-runs, and the error policy.

Usage
-----
Run ``pytest tests/test_assembler.py -v``. The ``style_guide`` fixture in
``conftest.py`` provides the shared source tree.
"""

from __future__ import annotations

import logging
import typing as typ

import pytest
from bs4 import BeautifulSoup

from stylebook.assembler import Assembler, assemble, wrap_page
from stylebook.config import build_assembly_config
from stylebook.errors import ErrorReport

if typ.TYPE_CHECKING:
    from pathlib import Path

    WriteTree = typ.Callable[[typ.Mapping[str, str]], Path]

MINIMAL_LAYOUT = {"src/views/layouts/default.html": "<main>{% body %}</main>"}


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def _text(soup: BeautifulSoup, selector: str) -> str:
    node = soup.select_one(selector)
    assert node is not None, f"expected an element matching {selector!r}"
    return node.get_text(strip=True)


def _run(root: Path, **options: typ.Any) -> list[Path]:
    return assemble({"root": root, **options})


def test_wrap_page_replaces_first_marker_only() -> None:
    """Only the first body marker is replaced and the page is inserted as-is."""
    layout = "<main>{% body %}</main>{%body%}"
    assert wrap_page(r"<p>\1</p>", layout) == r"<main><p>\1</p></main>{%body%}"


def test_writes_every_view_and_copy(style_guide: Path) -> None:
    """Root and collection views are written, plus the requested copy."""
    written = _run(style_guide)
    dist = style_guide / "dist"
    assert written == [
        dist / "index.html",
        dist / "pages" / "detail.html",
        dist / "copies" / "detail.html",
    ]
    produced = sorted(
        path.relative_to(dist).as_posix() for path in dist.rglob("*") if path.is_file()
    )
    assert produced == ["copies/detail.html", "index.html", "pages/detail.html"]


def test_root_view_renders_layout_include_and_material(style_guide: Path) -> None:
    """Views sit inside their layout and render fragments with local data."""
    _run(style_guide)
    soup = _soup(style_guide / "dist" / "index.html")
    assert _text(soup, "nav") == "Kit"
    assert _text(soup, "h1") == "Home"
    assert _text(soup, "body > button.primary") == "Save"


def test_material_output_keeps_inline_content(style_guide: Path) -> None:
    """Pretty-printed helper output keeps an inline element on one line."""
    _run(style_guide)
    html = (style_guide / "dist" / "index.html").read_text(encoding="utf-8")
    assert '<button class="primary">Save</button>' in html


def test_collection_view_gets_baseurl(style_guide: Path) -> None:
    """Views inside a collection link back to the root through ``baseurl``."""
    _run(style_guide)
    soup = _soup(style_guide / "dist" / "pages" / "detail.html")
    link = soup.select_one("a")
    assert link is not None
    assert link.get("href") == "../index.html"
    assert _text(soup, "div.alert") == "Careful"
    copy = style_guide / "dist" / "copies" / "detail.html"
    assert copy.read_text(encoding="utf-8") == (
        style_guide / "dist" / "pages" / "detail.html"
    ).read_text(encoding="utf-8")


def test_views_see_docs_views_and_materials(
    style_guide: Path, write_files: WriteTree
) -> None:
    """The three collection trees and the markdown filter are in every context."""
    write_files(
        {
            "src/views/pages/catalog.html": """
                ---
                title: Catalog
                order: 1
                ---
                {% for id, doc in docs.items() %}
                <section id="{{ id }}">{{ doc.content }}</section>
                {% endfor %}
                <ul class="views">
                {% for key, view in views["pages"].items.items() %}
                <li>{{ view.name }}</li>
                {% endfor %}
                </ul>
                <ol class="materials">
                {% for key, collection in materials.items() %}
                <li>{{ collection.name }}</li>
                {% endfor %}
                </ol>
                <div class="md">{{ "**bold**"|markdown }}</div>
                """,
        }
    )
    _run(style_guide)
    soup = _soup(style_guide / "dist" / "pages" / "catalog.html")
    assert _text(soup, "section#getting-started h1") == "Start"
    assert _text(soup, "section#getting-started strong") == "kits"
    assert [li.get_text() for li in soup.select("ul.views li")] == [
        "Catalog",
        "Detail",
    ]
    assert [li.get_text() for li in soup.select("ol.materials li")] == [
        "Components",
        "Structures",
    ]
    assert _text(soup, "div.md strong") == "bold"


def test_helper_context_and_keyword_precedence(
    style_guide: Path, write_files: WriteTree
) -> None:
    """Keyword arguments beat the context argument, which is the lowest source."""
    write_files(
        {
            "src/views/badges.html": """
                {{ material("badge") }}
                {{ material("badge", {"text": "ctx"}) }}
                {{ material("badge", {"text": "ctx"}, text="kwarg") }}
                {{ material("badge", undefined_name) }}
                """,
        }
    )
    _run(style_guide)
    soup = _soup(style_guide / "dist" / "badges.html")
    texts = [span.get_text(strip=True) for span in soup.select("span.badge")]
    assert texts == ["", "ctx", "kwarg", ""]


def test_build_data_beats_helper_context(
    style_guide: Path, write_files: WriteTree
) -> None:
    """Configured build data overrides the helper's context argument."""
    write_files(
        {"src/views/badges.html": '{{ material("badge", {"text": "ctx"}) }}'}
    )
    _run(style_guide, buildData={"text": "global"})
    soup = _soup(style_guide / "dist" / "badges.html")
    assert _text(soup, "span.badge") == "global"


def test_custom_keys_rename_helper_and_trees(
    style_guide: Path, write_files: WriteTree
) -> None:
    """The helper name follows the singular of the materials key."""
    write_files(
        {
            "src/views/index.html": "<p>home</p>",
            "src/views/custom.html": (
                '{{ pattern("badge", text="x") }}'
                '<p class="name">{{ patterns["structures"].name }}</p>'
            ),
        }
    )
    _run(style_guide, keys={"materials": "patterns"})
    soup = _soup(style_guide / "dist" / "custom.html")
    assert _text(soup, "span.badge") == "x"
    assert _text(soup, "p.name") == "Structures"


def test_user_helpers_are_registered(
    style_guide: Path, write_files: WriteTree
) -> None:
    """User helpers are available to views and replace built-ins by name."""
    write_files(
        {
            "src/views/helpers.html": (
                '<p class="a">{{ shout("hi") }}</p><p class="b">{{ markdown("x") }}</p>'
            ),
        }
    )
    _run(
        style_guide,
        helpers={"shout": lambda value: value.upper(), "markdown": lambda _: "MD"},
    )
    soup = _soup(style_guide / "dist" / "helpers.html")
    assert _text(soup, "p.a") == "HI"
    assert _text(soup, "p.b") == "MD"


def test_dest_map_redirects_collection(style_guide: Path) -> None:
    """Mapped collections are written to their configured directory."""
    written = _run(style_guide, destMap={"pages": "public/pages"}, extension=".htm")
    assert style_guide / "public" / "pages" / "detail.htm" in written
    assert (style_guide / "dist" / "index.htm").is_file()


def test_rerun_picks_up_changed_fragments(
    style_guide: Path, write_files: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    """A second run on the same assembler replaces registered fragments."""
    assembler = Assembler(build_assembly_config({"root": style_guide}))
    assembler.run()
    write_files(
        {
            "src/materials/components/02-buttons/01-primary.html": (
                "---\nlabel: Store\n---\n<button class=\"primary\">{{ label }}</button>"
            )
        }
    )
    with caplog.at_level(logging.WARNING, logger="stylebook"):
        assembler.run()
    soup = _soup(style_guide / "dist" / "index.html")
    assert _text(soup, "button.primary") == "Store"
    assert "replaces an earlier registration" not in caplog.text


def test_assemblers_share_nothing(
    style_guide: Path, tmp_path: Path
) -> None:
    """Separate assemblers keep separate registries and helpers."""
    other_root = tmp_path / "other"
    (other_root / "src" / "views" / "layouts").mkdir(parents=True)
    first = Assembler(build_assembly_config({"root": style_guide}))
    second = Assembler(build_assembly_config({"root": other_root}))
    first.setup()
    second.setup()
    assert "badge" in first.registry
    assert "badge" not in second.registry
    assert first.environment.globals["material"] is not (
        second.environment.globals["material"]
    )


def test_layouts_are_not_rendered_as_views(style_guide: Path) -> None:
    """Layout files and includes never appear in the output."""
    _run(style_guide)
    assert not (style_guide / "dist" / "layouts").exists()
    assert not list((style_guide / "dist").rglob("default.html"))
    assert not list((style_guide / "dist").rglob("nav.html"))


@pytest.mark.parametrize(
    ("files", "name", "reason"),
    [
        (
            {"src/views/index.html": "---\nlayout: missing\n---\n<p>x</p>"},
            "LayoutNotFoundError",
            "missing-layout",
        ),
        (
            {"src/views/index.html": '{{ material("nope") }}'},
            "ViewRenderError",
            "template",
        ),
        (
            {"src/views/index.html": "{% if %}"},
            "ViewRenderError",
            "template",
        ),
        (
            {"src/views/index.html": "---\ntitle: [unclosed\n---\n<p>x</p>"},
            "FrontMatterError",
            "front-matter",
        ),
        (
            {
                "src/views/index.html": "<p>x</p>",
                "src/materials/broken/bad.html": "---\nlabel: x\n---\n{% for %}",
            },
            "TemplateSyntaxError",
            "",
        ),
    ],
)
def test_on_error_receives_failures(
    project_root: Path,
    write_files: WriteTree,
    files: dict[str, str],
    name: str,
    reason: str,
) -> None:
    """Failures reach the callback and the run returns no paths."""
    write_files({**MINIMAL_LAYOUT, **files})
    received: list[ErrorReport] = []
    assert _run(project_root, onError=received.append) == []
    assert len(received) == 1
    assert received[0].name == name
    assert received[0].reason == reason


def test_view_errors_name_the_view(
    project_root: Path, write_files: WriteTree
) -> None:
    """Render failures report the view file they came from."""
    write_files({**MINIMAL_LAYOUT, "src/views/index.html": '{{ material("nope") }}'})
    received: list[ErrorReport] = []
    _run(project_root, on_error=received.append)
    report = received[0]
    assert report.path == project_root / "src" / "views" / "index.html"
    assert "index.html" in report.message
    assert "nope" in report.message


def test_log_errors_continues(
    project_root: Path, write_files: WriteTree, caplog: pytest.LogCaptureFixture
) -> None:
    """With ``log_errors`` the run logs the failure and returns."""
    write_files({**MINIMAL_LAYOUT, "src/views/index.html": "{% if %}"})
    with caplog.at_level(logging.ERROR, logger="stylebook"):
        assert _run(project_root, log_errors=True) == []
    assert "Error (stylebook)" in caplog.text


def test_unhandled_failure_exits(project_root: Path, write_files: WriteTree) -> None:
    """Without an error policy a failed run exits with status 1."""
    write_files({**MINIMAL_LAYOUT, "src/views/index.html": "{% if %}"})
    with pytest.raises(SystemExit) as excinfo:
        _run(project_root)
    assert excinfo.value.code == 1

"""Render Markdown notes and docs, and pretty-print fragment markup."""

from __future__ import annotations

import re
import typing as typ
from html import escape

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import NavigableString, PreformattedString, Tag
from bs4.formatter import HTMLFormatter
from markdown import Markdown
from markupsafe import Markup

if typ.TYPE_CHECKING:
    from bs4.element import PageElement

    from .config import BeautifierOptions

CODE_FENCE_PATTERN = re.compile(r"```([A-Za-z0-9_+#.-]+)?[^\n]*\n(.*?)```", re.DOTALL)
FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
WHITESPACE_RUN = re.compile(r"\s+")

INLINE_ELEMENTS = frozenset(
    {
        "a", "abbr", "acronym", "area", "audio", "b", "bdi", "bdo", "big", "br",
        "button", "canvas", "cite", "code", "data", "datalist", "del", "dfn",
        "em", "embed", "i", "iframe", "img", "input", "ins", "kbd", "label",
        "map", "mark", "math", "meter", "noscript", "object", "output",
        "progress", "q", "ruby", "s", "samp", "select", "small", "span",
        "strike", "strong", "sub", "sup", "svg", "template", "textarea",
        "time", "tt", "u", "var", "video", "wbr",
    }
)  # fmt: skip
RAW_ELEMENTS = frozenset({"pre", "textarea", "script", "style"})


class MarkdownRenderer:
    """Render Markdown into HTML with syntax-highlighted code fences."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style

    def render(self, text: str) -> Markup:
        """Render ``text`` into HTML that templates can emit unescaped.

        Inline HTML in the source is passed through, matching how notes and
        docs are authored alongside template markup.
        """
        normalized = FENCED_INDENT_PATTERN.sub(r"\1", text or "")
        if not normalized.strip():
            return Markup("")
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        html = md.convert(normalized)
        return Markup(self._annotate_codehilite(html, normalized))

    @staticmethod
    def _annotate_codehilite(html: str, source_markdown: str) -> str:
        """Attach ``data-language`` to each highlighted block."""
        languages = [
            match.group(1) or "text"
            for match in CODE_FENCE_PATTERN.finditer(source_markdown)
        ]
        if not languages:
            return html
        lang_iter = iter(languages)

        def _repl(_match: re.Match[str]) -> str:
            lang = next(lang_iter, "text")
            return (
                f'<div class="codehilite" data-language="{escape(lang, quote=True)}">'
            )

        return CODEHILITE_OPEN_TAG.sub(_repl, html, len(languages))


class HtmlBeautifier:
    """Indent rendered fragment markup for readable style-guide output."""

    def __init__(self, options: BeautifierOptions) -> None:
        self.options = options
        self._indent = options.indent
        self._formatter = HTMLFormatter(
            entity_substitution=EntitySubstitution.substitute_xml
        )

    def beautify(self, html: str) -> str:
        """Return ``html`` with block elements indented one per line.

        Inline elements and text stay on the line of the block that holds
        them, so the rendered text is unchanged. ``pre``, ``textarea``,
        ``script`` and ``style`` are emitted verbatim.

        Examples
        --------
        >>> from stylebook.config import BeautifierOptions
        >>> beautifier = HtmlBeautifier(BeautifierOptions())
        >>> beautifier.beautify("<ul><li>Hello <b>world</b>!</li></ul>")
        '<ul>\\n\\t<li>Hello <b>world</b>!</li>\\n</ul>'
        """
        if not html.strip():
            return ""
        soup = BeautifulSoup(html, "html.parser")
        return "\n".join(self._lines(soup.contents, 0))

    def _lines(self, children: list[PageElement], depth: int) -> list[str]:
        prefix = self._indent * depth
        lines: list[str] = []
        run: list[str] = []

        def _flush() -> None:
            text = "".join(run).strip()
            if text:
                lines.append(f"{prefix}{text}")
            run.clear()

        for child in children:
            if _is_inline(child):
                run.append(self._inline(child))
            else:
                _flush()
                lines.extend(self._block(child, depth))
        _flush()
        return lines

    def _block(self, node: PageElement, depth: int) -> list[str]:
        prefix = self._indent * depth
        if not isinstance(node, Tag):
            return [f"{prefix}{node.output_ready(self._formatter).strip()}"]
        if node.name in RAW_ELEMENTS:
            return [f"{prefix}{node.decode(formatter=self._formatter)}"]
        opening = self._opening_tag(node)
        if node.is_empty_element:
            return [f"{prefix}{opening[:-1]}/>"]
        closing = f"</{node.name}>"
        if all(_is_inline(child) for child in node.contents):
            inner = "".join(self._inline(child) for child in node.contents).strip()
            return [f"{prefix}{opening}{inner}{closing}"]
        return [
            f"{prefix}{opening}",
            *self._lines(node.contents, depth + 1),
            f"{prefix}{closing}",
        ]

    def _inline(self, node: PageElement) -> str:
        if isinstance(node, Tag):
            return node.decode(formatter=self._formatter)
        text = node.output_ready(self._formatter)
        return WHITESPACE_RUN.sub(" ", text)

    def _opening_tag(self, tag: Tag) -> str:
        parts = [tag.name]
        for key, value in self._formatter.attributes(tag):
            if value is None:
                parts.append(key)
                continue
            if isinstance(value, list | tuple):
                value = " ".join(value)
            quoted = EntitySubstitution.quoted_attribute_value(
                self._formatter.attribute_value(str(value))
            )
            parts.append(f"{key}={quoted}")
        return f"<{' '.join(parts)}>"


def _is_inline(node: PageElement) -> bool:
    """Return whether ``node`` flows inside the line of its parent block."""
    if isinstance(node, Tag):
        return node.name in INLINE_ELEMENTS
    return isinstance(node, NavigableString) and not isinstance(
        node, PreformattedString
    )


__all__ = ["CODE_FENCE_PATTERN", "HtmlBeautifier", "MarkdownRenderer"]

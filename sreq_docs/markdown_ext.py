"""Python-Markdown extensions used by the documentation renderer.

``DocsExtension`` bundles the GitHub-flavoured additions Python-Markdown lacks
(``~~strikethrough~~`` and bare URL autolinks) with the heading anchor pass.
The anchor pass assigns ``id`` attributes to ``h2``/``h3`` elements and
records the matching :class:`~sreq_docs.models.TocItem` sequence in the same
walk, so the table of contents and the rendered anchors cannot disagree.
"""

from __future__ import annotations

import html
import re
import typing as typ
import xml.etree.ElementTree as etree

from markdown.extensions import Extension
from markdown.extensions.toc import render_inner_html, strip_tags
from markdown.inlinepatterns import InlineProcessor, SimpleTagInlineProcessor
from markdown.treeprocessors import Treeprocessor

from .markdown_parser import slugify, unique_slug
from .models import TocItem

if typ.TYPE_CHECKING:
    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any

STRIKETHROUGH_RE = r"(~{2})(.+?)\1"
BARE_URL_RE = r"(?<![(\"'<=/])\b(https?://[^\s<>()\[\]]*[^\s<>()\[\].,;:!?'\"])"
TOC_HEADING_TAGS = {"h2": 2, "h3": 3}


class BareUrlInlineProcessor(InlineProcessor):
    """Turn bare ``http(s)://`` URLs into anchors, as GFM autolinks do."""

    ANCESTOR_EXCLUDES = ("a",)

    def handleMatch(  # type: ignore[override]  # noqa: N802
        self, m: re.Match[str], data: str
    ) -> tuple[etree.Element, int, int]:
        """Return an ``<a>`` element wrapping the matched URL."""
        url = m.group(1)
        element = etree.Element("a")
        element.set("href", url)
        element.text = url
        return element, m.start(0), m.end(0)


class HeadingAnchorTreeprocessor(Treeprocessor):
    """Assign slug ids to ``h2``/``h3`` headings and collect TOC entries."""

    def __init__(self, md: Markdown, toc_items: list[TocItem]) -> None:
        super().__init__(md)
        self.toc_items = toc_items

    def run(self, root: etree.Element) -> None:
        """Walk headings in document order, writing ids and TOC entries."""
        used: set[str] = set()
        for element in root.iter():
            level = TOC_HEADING_TAGS.get(element.tag)
            if level is None:
                continue
            text = self._visible_text(element)
            anchor = unique_slug(slugify(text), used)
            element.set("id", anchor)
            self.toc_items.append(TocItem(id=anchor, text=text, level=level))

    def _visible_text(self, element: etree.Element) -> str:
        """Return the heading's plain text with inline markup removed."""
        inner = render_inner_html(element, self.md)
        return " ".join(html.unescape(strip_tags(inner)).split())


class DocsExtension(Extension):
    """Register strikethrough, bare autolinks, and heading anchors.

    After ``Markdown.convert`` the collected table of contents is available
    from :attr:`toc_items`; it is cleared whenever the Markdown instance is
    reset.
    """

    def __init__(self, **kwargs: typ.Any) -> None:
        super().__init__(**kwargs)
        self.toc_items: list[TocItem] = []

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the inline patterns and the heading tree processor."""
        md.registerExtension(self)
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_RE, "del"), "sreq_strike", 55
        )
        md.inlinePatterns.register(
            BareUrlInlineProcessor(BARE_URL_RE, md), "sreq_bare_url", 105
        )
        md.treeprocessors.register(
            HeadingAnchorTreeprocessor(md, self.toc_items), "sreq_heading_anchors", 15
        )

    def reset(self) -> None:
        """Drop TOC entries gathered by a previous conversion."""
        self.toc_items.clear()


__all__ = [
    "BareUrlInlineProcessor",
    "DocsExtension",
    "HeadingAnchorTreeprocessor",
]

"""Shared dataclasses used by the rendering, navigation, and search pipeline."""

from __future__ import annotations

import dataclasses as dc
import typing as typ


@dc.dataclass(frozen=True, slots=True)
class TocItem:
    """Table-of-contents entry for one ``h2``/``h3`` heading.

    Attributes
    ----------
    id : str
        Anchor id written onto the heading element in the rendered HTML.
    text : str
        Visible heading text.
    level : int
        Heading level, either ``2`` or ``3``.
    """

    id: str
    text: str
    level: int


@dc.dataclass(frozen=True, slots=True)
class RenderedDoc:
    """Output of rendering one markdown document.

    Attributes
    ----------
    html : str
        Rendered HTML body.
    toc : tuple[TocItem, ...]
        Headings in document order.
    meta : dict[str, Any]
        Frontmatter values.
    title : str
        Resolved document title.
    """

    html: str
    toc: tuple[TocItem, ...]
    meta: dict[str, typ.Any]
    title: str


@dc.dataclass(frozen=True, slots=True)
class SidebarLink:
    """Sidebar entry pointing at a site-rooted ``/docs`` href."""

    label: str
    href: str


@dc.dataclass(frozen=True, slots=True)
class SidebarSection:
    """Group of sidebar links; ``heading`` is empty for the leading group."""

    heading: str
    links: tuple[SidebarLink, ...]


@dc.dataclass(frozen=True, slots=True)
class PrevNext:
    """Neighbouring links of a page in the flattened sidebar order."""

    prev: SidebarLink | None
    next: SidebarLink | None


@dc.dataclass(frozen=True, slots=True)
class Breadcrumb:
    """One breadcrumb segment for a document slug."""

    label: str
    href: str
    is_last: bool


@dc.dataclass(frozen=True, slots=True)
class SearchEntry:
    """Indexed plain-text summary of one sidebar document.

    Attributes
    ----------
    title : str
        Sidebar label of the document.
    href : str
        Site-rooted document href.
    section : str
        Sidebar section heading the link belongs to.
    content : str
        Markdown-stripped body, truncated to the configured limit.
    """

    title: str
    href: str
    section: str
    content: str


@dc.dataclass(frozen=True, slots=True)
class SearchResult:
    """Ranked match for a query, with an optional content snippet."""

    title: str
    href: str
    section: str
    snippet: str
    score: int


__all__ = [
    "Breadcrumb",
    "PrevNext",
    "RenderedDoc",
    "SearchEntry",
    "SearchResult",
    "SidebarLink",
    "SidebarSection",
    "TocItem",
]

r"""Parse the sidebar navigation file and derive its flat reading order.

The sidebar is a plain markdown bullet list. Each line is classified as a
section heading (``- **Commands**``), a link (``- [Run](/commands/run)``), or
noise, and the resulting events are folded into ordered
:class:`~sreq_docs.models.SidebarSection` values. External links are dropped
and internal paths are rewritten to site-rooted ``/docs`` hrefs.

Example
-------
>>> from sreq_docs.navigation import parse_sidebar_text, flatten_sidebar
>>> sections = parse_sidebar_text("- **Commands**\n- [Run](/commands/run)\n")
>>> sections[0].heading, sections[0].links[0].href
('Commands', '/docs/commands/run')
>>> [link.label for link in flatten_sidebar(sections)]
['Run']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import re
import typing as typ

from ._constants import DOCS_ROOT_HREF
from .models import PrevNext, SidebarLink, SidebarSection

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

logger = logging.getLogger(__name__)

HEADING_LINE_PATTERN = re.compile(r"^-\s+\*\*(.+?)\*\*$")
LINK_LINE_PATTERN = re.compile(r"^-\s+\[(.+?)\]\((.+?)\)$")
EXTERNAL_TARGET_PATTERN = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*:|//)")


@dc.dataclass(frozen=True, slots=True)
class HeadingLine:
    """A ``- **Heading**`` line that opens a new section."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class LinkLine:
    """A ``- [Label](target)`` line with its raw target."""

    label: str
    target: str


LineEvent = HeadingLine | LinkLine


def classify_line(line: str) -> LineEvent | None:
    """Return the event a sidebar line produces, or ``None`` to ignore it."""
    trimmed = line.strip()
    if heading := HEADING_LINE_PATTERN.match(trimmed):
        return HeadingLine(heading.group(1))
    if link := LINK_LINE_PATTERN.match(trimmed):
        return LinkLine(label=link.group(1), target=link.group(2))
    return None


def is_external_target(target: str) -> bool:
    """Return whether ``target`` carries a URL scheme or is protocol-relative."""
    return bool(EXTERNAL_TARGET_PATTERN.match(target))


def target_to_href(target: str) -> str:
    """Rewrite a sidebar path into a site-rooted docs href.

    Examples
    --------
    >>> target_to_href("/commands/run/")
    '/docs/commands/run'
    >>> target_to_href("/")
    '/docs'
    """
    normalized = target.removeprefix("/").removesuffix("/")
    if not normalized:
        return DOCS_ROOT_HREF
    return f"{DOCS_ROOT_HREF}/{normalized}"


class _SectionAccumulator:
    """Fold line events into sections, flushing on headings and at the end."""

    def __init__(self) -> None:
        self.sections: list[SidebarSection] = []
        self._heading = ""
        self._links: list[SidebarLink] = []

    def feed(self, event: LineEvent) -> None:
        match event:
            case HeadingLine(text=text):
                self._flush()
                self._heading = text
            case LinkLine(label=label, target=target):
                if is_external_target(target):
                    logger.debug("skipping external sidebar link %s", target)
                    return
                self._links.append(SidebarLink(label=label, href=target_to_href(target)))

    def finish(self) -> list[SidebarSection]:
        self._flush()
        return self.sections

    def _flush(self) -> None:
        if self._heading or self._links:
            self.sections.append(
                SidebarSection(heading=self._heading, links=tuple(self._links))
            )
        self._heading = ""
        self._links = []


def parse_sidebar_text(text: str) -> list[SidebarSection]:
    """Parse sidebar markdown into sections in source order.

    Parameters
    ----------
    text : str
        Contents of the navigation file.

    Returns
    -------
    list[SidebarSection]
        Sections in source order. Links that precede the first heading form a
        leading section with an empty heading. Empty input yields ``[]``.
    """
    accumulator = _SectionAccumulator()
    for line in text.splitlines():
        event = classify_line(line)
        if event is not None:
            accumulator.feed(event)
    return accumulator.finish()


def load_sidebar(path: Path) -> list[SidebarSection]:
    """Parse the navigation file at ``path``; a missing file yields ``[]``."""
    if not path.is_file():
        logger.warning("navigation file %s not found; sidebar is empty", path)
        return []
    return parse_sidebar_text(path.read_text(encoding="utf-8"))


def flatten_sidebar(sections: cabc.Iterable[SidebarSection]) -> list[SidebarLink]:
    """Return every section's links in order, dropping section boundaries."""
    return [link for section in sections for link in section.links]


def adjacent_links(flat: cabc.Sequence[SidebarLink], href: str) -> PrevNext:
    """Return the links before and after ``href`` in ``flat``.

    Either side is ``None`` at the ends of the list, and both are ``None``
    when ``href`` is not part of the navigation. There is no wraparound.
    """
    index = next((i for i, link in enumerate(flat) if link.href == href), None)
    if index is None:
        return PrevNext(prev=None, next=None)
    prev = flat[index - 1] if index > 0 else None
    nxt = flat[index + 1] if index + 1 < len(flat) else None
    return PrevNext(prev=prev, next=nxt)


__all__ = [
    "HeadingLine",
    "LinkLine",
    "adjacent_links",
    "classify_line",
    "flatten_sidebar",
    "is_external_target",
    "load_sidebar",
    "parse_sidebar_text",
    "target_to_href",
]

"""Build the documentation search index and rank entries against a query.

The index holds one :class:`~sreq_docs.models.SearchEntry` per sidebar link
whose document exists. Entry content is the markdown-stripped body truncated
to a fixed length, which bounds both the index size and the cost of each
query.

Ranking is a pure function of the entries and the query:

* title equals the query: +100, else title starts with it: +50, else title
  contains it: +30;
* content contains the query: +10, added independently;
* zero scores are dropped, the rest are stably sorted by descending score and
  cut to the top ten.

Example
-------
>>> from sreq_docs.models import SearchEntry
>>> from sreq_docs.search import rank_entries
>>> entries = [SearchEntry("Run", "/docs/commands/run", "Commands", "runs a request")]
>>> [(r.title, r.score) for r in rank_entries(entries, "run")]
[('Run', 110)]
"""

from __future__ import annotations

import dataclasses as dc
import json
import logging
import typing as typ

from ._constants import (
    DEFAULT_SECTION_LABEL,
    ELLIPSIS,
    MAX_SEARCH_RESULTS,
    MIN_QUERY_LENGTH,
    SEARCH_CONTENT_LIMIT,
    SNIPPET_LEADING_CHARS,
    SNIPPET_TRAILING_CHARS,
)
from .markdown_parser import split_frontmatter, strip_markdown
from .models import SearchEntry, SearchResult
from .paths import href_to_slug

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .models import SidebarSection
    from .paths import DocPathResolver

logger = logging.getLogger(__name__)

EXACT_TITLE_SCORE = 100
TITLE_PREFIX_SCORE = 50
TITLE_SUBSTRING_SCORE = 30
CONTENT_SCORE = 10


class SearchIndexBuilder:
    """Collect a search entry for every resolvable sidebar link."""

    def __init__(
        self,
        sections: cabc.Sequence[SidebarSection],
        resolver: DocPathResolver,
        *,
        content_limit: int = SEARCH_CONTENT_LIMIT,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        sections : Sequence[SidebarSection]
            Parsed sidebar; defines index membership and order.
        resolver : DocPathResolver
            Resolver used to locate each link's markdown source.
        content_limit : int, optional
            Maximum number of characters of plain text kept per entry.
        """
        self.sections = sections
        self.resolver = resolver
        self.content_limit = content_limit

    def build(self) -> list[SearchEntry]:
        """Return entries in sidebar order, skipping links without a file."""
        entries: list[SearchEntry] = []
        for section in self.sections:
            label = section.heading or DEFAULT_SECTION_LABEL
            for link in section.links:
                path = self.resolver.find(href_to_slug(link.href))
                if path is None:
                    logger.debug("no document for sidebar link %s; skipped", link.href)
                    continue
                _meta, body = split_frontmatter(path.read_text(encoding="utf-8"))
                entries.append(
                    SearchEntry(
                        title=link.label,
                        href=link.href,
                        section=label,
                        content=strip_markdown(body, self.content_limit),
                    )
                )
        logger.debug("built search index with %d entries", len(entries))
        return entries


def write_search_index(entries: cabc.Iterable[SearchEntry], path: Path) -> Path:
    """Serialize ``entries`` to ``path`` as a JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [dc.asdict(entry) for entry in entries]
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def load_search_index(path: Path) -> list[SearchEntry]:
    """Load entries previously written by :func:`write_search_index`.

    Raises
    ------
    ValueError
        If the file is not a JSON array of entry objects.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        msg = f"Search index '{path}' must contain a JSON array."
        raise ValueError(msg)
    try:
        return [SearchEntry(**item) for item in payload]
    except TypeError as exc:
        msg = f"Search index '{path}' contains malformed entries: {exc}"
        raise ValueError(msg) from exc


def make_snippet(content: str, match_index: int, query_length: int) -> str:
    """Return the content window around a match, with edge ellipses."""
    start = max(0, match_index - SNIPPET_LEADING_CHARS)
    end = min(len(content), match_index + query_length + SNIPPET_TRAILING_CHARS)
    prefix = ELLIPSIS if start > 0 else ""
    suffix = ELLIPSIS if end < len(content) else ""
    return f"{prefix}{content[start:end].strip()}{suffix}"


def _title_score(title: str, query: str) -> int:
    if title == query:
        return EXACT_TITLE_SCORE
    if title.startswith(query):
        return TITLE_PREFIX_SCORE
    if query in title:
        return TITLE_SUBSTRING_SCORE
    return 0


def rank_entries(
    entries: cabc.Iterable[SearchEntry],
    query: str,
    *,
    limit: int = MAX_SEARCH_RESULTS,
) -> list[SearchResult]:
    """Score ``entries`` against ``query`` case-insensitively.

    Parameters
    ----------
    entries : Iterable[SearchEntry]
        Prebuilt index entries.
    query : str
        Raw query text. Queries shorter than two characters match nothing.
    limit : int, optional
        Maximum number of results; defaults to ten.

    Returns
    -------
    list[SearchResult]
        Matches ordered by descending score; equal scores keep index order.
    """
    if len(query) < MIN_QUERY_LENGTH:
        return []
    needle = query.lower()
    scored: list[SearchResult] = []
    for entry in entries:
        score = _title_score(entry.title.lower(), needle)
        content_index = entry.content.lower().find(needle)
        if content_index >= 0:
            score += CONTENT_SCORE
        if score == 0:
            continue
        snippet = ""
        if content_index >= 0:
            snippet = make_snippet(entry.content, content_index, len(needle))
        scored.append(
            SearchResult(
                title=entry.title,
                href=entry.href,
                section=entry.section,
                snippet=snippet,
                score=score,
            )
        )
    scored.sort(key=lambda result: result.score, reverse=True)
    return scored[:limit]


__all__ = [
    "SearchIndexBuilder",
    "load_search_index",
    "make_snippet",
    "rank_entries",
    "write_search_index",
]

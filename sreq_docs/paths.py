"""Resolve documentation slugs to markdown files on disk.

A slug is the ordered sequence of URL path segments beneath ``/docs``. Each
slug maps to exactly one markdown file: either ``<segments>.md`` or, failing
that, ``<segments>/README.md`` for a directory landing page. The resolver
never performs fuzzy or partial matching.

Example
-------
>>> from pathlib import Path
>>> from sreq_docs.paths import DocPathResolver, slug_to_href
>>> resolver = DocPathResolver(Path("docs/content"))  # doctest: +SKIP
>>> resolver.resolve(["commands", "run"])  # doctest: +SKIP
PosixPath('docs/content/commands/run.md')
>>> slug_to_href(["commands", "run"])
'/docs/commands/run'
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ._constants import DOC_EXTENSION, DOCS_ROOT_HREF, HIDDEN_PREFIX, INDEX_FILENAME

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = logging.getLogger(__name__)

Slug = tuple[str, ...]


class DocNotFoundError(LookupError):
    """Raised when a slug does not resolve to any markdown document."""

    def __init__(self, slug: cabc.Sequence[str]) -> None:
        self.slug: Slug = tuple(slug)
        super().__init__(f"No document found for '{slug_to_href(self.slug)}'.")


def slug_to_href(slug: cabc.Sequence[str]) -> str:
    """Return the site-rooted href for ``slug`` (``/docs`` for the root)."""
    if not slug:
        return DOCS_ROOT_HREF
    return f"{DOCS_ROOT_HREF}/{'/'.join(slug)}"


def href_to_slug(href: str) -> Slug:
    """Return the slug segments encoded in a ``/docs/...`` href."""
    remainder = href
    if remainder.startswith(DOCS_ROOT_HREF):
        remainder = remainder[len(DOCS_ROOT_HREF) :]
    return tuple(segment for segment in remainder.split("/") if segment)


def _is_safe_segment(segment: str) -> bool:
    """Return whether ``segment`` names a single path component."""
    if segment in {"", ".", ".."}:
        return False
    return "/" not in segment and "\\" not in segment


class DocPathResolver:
    """Map slugs to markdown files below a docs root directory."""

    def __init__(self, docs_dir: Path) -> None:
        self.docs_dir = docs_dir

    def find(self, slug: cabc.Sequence[str]) -> Path | None:
        """Return the file for ``slug`` or ``None`` when nothing matches.

        Parameters
        ----------
        slug : Sequence[str]
            Ordered path segments; empty for the docs root.

        Returns
        -------
        Path | None
            ``<slug>.md`` when it exists, otherwise ``<slug>/README.md`` when
            that exists, otherwise ``None``.
        """
        segments = tuple(slug)
        if not all(_is_safe_segment(segment) for segment in segments):
            return None

        if segments:
            *parents, leaf = segments
            direct = self.docs_dir.joinpath(*parents, f"{leaf}{DOC_EXTENSION}")
            if direct.is_file():
                return direct

        index = self.docs_dir.joinpath(*segments, INDEX_FILENAME)
        if index.is_file():
            return index
        return None

    def resolve(self, slug: cabc.Sequence[str]) -> Path:
        """Return the file for ``slug`` or raise :class:`DocNotFoundError`."""
        path = self.find(slug)
        if path is None:
            raise DocNotFoundError(slug)
        logger.debug("resolved %s to %s", slug_to_href(slug), path)
        return path

    def iter_slugs(self) -> cabc.Iterator[Slug]:
        """Yield the slug of every document below the docs root.

        Files and directories starting with ``_`` are skipped. ``README.md``
        contributes its directory's slug; other markdown files contribute
        their path without the extension.
        """
        if not self.docs_dir.is_dir():
            return
        yield from self._walk(self.docs_dir, ())

    def _walk(self, directory: Path, prefix: Slug) -> cabc.Iterator[Slug]:
        for entry in sorted(directory.iterdir(), key=lambda item: item.name):
            if entry.name.startswith(HIDDEN_PREFIX):
                continue
            if entry.is_dir():
                yield from self._walk(entry, (*prefix, entry.name))
            elif entry.suffix == DOC_EXTENSION:
                if entry.name == INDEX_FILENAME:
                    yield prefix
                else:
                    yield (*prefix, entry.stem)


__all__ = [
    "DocNotFoundError",
    "DocPathResolver",
    "Slug",
    "href_to_slug",
    "slug_to_href",
]

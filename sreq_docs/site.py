"""Assemble rendered documents into navigable pages and write the site.

:class:`DocsPageBuilder` ties the pieces together for one docs tree: it
parses the sidebar once, renders a page per slug with breadcrumbs and
previous/next links, maps unknown slugs to a "Not Found" page, and writes the
HTML pages plus the JSON search index.

Example
-------
>>> from pathlib import Path
>>> from sreq_docs.config import SiteConfig
>>> from sreq_docs.site import DocsPageBuilder
>>> builder = DocsPageBuilder(SiteConfig.for_docs_dir(Path("docs/content")))  # doctest: +SKIP
>>> builder.run()  # doctest: +SKIP
[PosixPath('public/docs/index.html'), ...]
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .models import Breadcrumb
from .navigation import adjacent_links, flatten_sidebar, load_sidebar
from .paths import DocNotFoundError, DocPathResolver, slug_to_href
from .renderer import DocRenderer, HighlighterHandle, PygmentsHighlighter
from .search import SearchIndexBuilder, write_search_index

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SiteConfig
    from .models import PrevNext, RenderedDoc, SearchEntry, SidebarSection
    from .paths import Slug

logger = logging.getLogger(__name__)

NOT_FOUND_TITLE = "Not Found"
PAGE_FILENAME = "index.html"


@dc.dataclass(frozen=True, slots=True)
class DocPage:
    """Everything a page template needs for one slug.

    ``doc`` is ``None`` when the slug did not resolve; the page then renders
    as a "Not Found" outcome.
    """

    slug: Slug
    href: str
    html_title: str
    doc: RenderedDoc | None
    breadcrumbs: tuple[Breadcrumb, ...]
    prev_next: PrevNext

    @property
    def found(self) -> bool:
        """Return whether the slug resolved to a document."""
        return self.doc is not None


def _crumb_label(segment: str) -> str:
    """Capitalize the first character and turn hyphens into spaces."""
    return segment[:1].upper() + segment[1:].replace("-", " ")


def build_breadcrumbs(slug: cabc.Sequence[str]) -> tuple[Breadcrumb, ...]:
    """Return one breadcrumb per slug segment; the root has none."""
    return tuple(
        Breadcrumb(
            label=_crumb_label(segment),
            href=slug_to_href(slug[: index + 1]),
            is_last=index == len(slug) - 1,
        )
        for index, segment in enumerate(slug)
    )


class DocsPageBuilder:
    """Render docs pages with navigation context and emit the search index."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        templates_dir: Path | None = None,
        highlighter: HighlighterHandle | None = None,
    ) -> None:
        """Initialize the builder, parse the sidebar, and load templates.

        Parameters
        ----------
        config : SiteConfig
            Site settings naming the docs tree, sidebar, and outputs.
        templates_dir : Path, optional
            Directory containing Jinja templates; defaults to the package
            templates.
        highlighter : HighlighterHandle, optional
            Shared highlighter; defaults to a Pygments handle using the
            configured style.
        """
        self.config = config
        self.resolver = DocPathResolver(config.docs_dir)
        self.highlighter = highlighter or HighlighterHandle(
            lambda: PygmentsHighlighter(config.pygments_style)
        )
        self.renderer = DocRenderer(self.resolver, highlighter=self.highlighter)
        self.sections: list[SidebarSection] = load_sidebar(config.sidebar_path)
        self.flat_links = flatten_sidebar(self.sections)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("doc_page.jinja")

    def page(self, slug: cabc.Sequence[str]) -> DocPage:
        """Return the page for ``slug``, or a "Not Found" page."""
        segments = tuple(slug)
        href = slug_to_href(segments)
        try:
            doc = self.renderer.render_slug(segments)
        except DocNotFoundError:
            logger.info("no document for %s", href)
            doc = None
        html_title = (
            f"{doc.title} | {self.config.site_name}" if doc else NOT_FOUND_TITLE
        )
        return DocPage(
            slug=segments,
            href=href,
            html_title=html_title,
            doc=doc,
            breadcrumbs=build_breadcrumbs(segments),
            prev_next=adjacent_links(self.flat_links, href),
        )

    def render_html(self, page: DocPage) -> str:
        """Render ``page`` through the page template."""
        highlighter = self.highlighter.acquire()
        html = self.template.render(
            page=page,
            sections=self.sections,
            site_name=self.config.site_name,
            pygments_css=getattr(highlighter, "stylesheet", ""),
        )
        if not html.endswith("\n"):
            html += "\n"
        return html

    def build_search_index(self) -> list[SearchEntry]:
        """Return search entries for every resolvable sidebar link."""
        builder = SearchIndexBuilder(
            self.sections,
            self.resolver,
            content_limit=self.config.search_content_limit,
        )
        return builder.build()

    def output_path(self, slug: cabc.Sequence[str]) -> Path:
        """Return where the page for ``slug`` is written."""
        return self.config.output_dir.joinpath("docs", *slug, PAGE_FILENAME)

    def run(self) -> list[Path]:
        """Write every document page and the search index.

        Returns
        -------
        list[Path]
            Written page paths in slug order, followed by the search index.
        """
        written: list[Path] = []
        # ``x.md`` and ``x/README.md`` share a slug; write it once.
        for slug in dict.fromkeys(self.resolver.iter_slugs()):
            page = self.page(slug)
            output_path = self.output_path(slug)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(self.render_html(page), encoding="utf-8")
            written.append(output_path)
        entries = self.build_search_index()
        written.append(write_search_index(entries, self.config.search_index_output))
        return written


__all__ = ["DocPage", "DocsPageBuilder", "build_breadcrumbs"]

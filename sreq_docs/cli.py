"""Cyclopts CLI entrypoint for rendering and searching the sreq docs.

The ``docs`` console script defined here can write the static docs pages and
search index, print the rendered HTML of a single page, rebuild only the
search index, or run a query against the index from the terminal.

Examples
--------
Build every page and the search index for the default configuration:

>>> from sreq_docs.cli import main
>>> main()  # doctest: +SKIP

Search a docs tree without a configuration file:

>>> from sreq_docs.cli import app
>>> app(["search", "run", "--docs-dir", "docs/content"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import MIN_QUERY_LENGTH
from .config import SiteConfig, SiteConfigError, load_site_config
from .paths import DocNotFoundError, DocPathResolver, href_to_slug
from .renderer import DocRenderer, HighlighterHandle, PygmentsHighlighter
from .search import load_search_index, rank_entries, write_search_index
from .site import DocsPageBuilder

DEFAULT_CONFIG = Path("config/docs.yaml")

app = App(name="docs", config=cyclopts.config.Env("DOCS_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to site config", env_var="DOCS_CONFIG")
]
DocsDirOption = typ.Annotated[
    Path | None,
    Parameter(help="Markdown docs directory (overrides the config file)"),
]
VerboseOption = typ.Annotated[bool, Parameter(help="Enable debug logging")]


def _configure_logging(*, verbose: bool) -> None:
    """Send library log records to stderr at WARNING, or DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _resolve_config(
    config: Path, docs_dir: Path | None, output_dir: Path | None = None
) -> SiteConfig:
    """Return the site config from ``--docs-dir`` or the configuration file."""
    if docs_dir is not None:
        overrides: dict[str, typ.Any] = {}
        if output_dir is not None:
            overrides["output_dir"] = output_dir
        return SiteConfig.for_docs_dir(docs_dir, **overrides)
    if not config.exists():
        msg = f"Configuration file '{config}' not found; pass --docs-dir instead."
        raise SiteConfigError(msg)
    site = load_site_config(config)
    if output_dir is not None:
        site.output_dir = output_dir
        site.search_index_output = output_dir / site.search_index_output.name
    return site


@app.command(help="Render every docs page and write the search index.")
def build(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    docs_dir: DocsDirOption = None,
    output_dir: typ.Annotated[
        Path | None, Parameter(help="Override the output folder")
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Write HTML pages for every document plus the JSON search index.

    Parameters
    ----------
    config : Path, optional
        Path to the ``docs.yaml`` configuration file (overridable via
        ``DOCS_CONFIG``).
    docs_dir : Path or None, optional
        Docs directory to use instead of the configuration file.
    output_dir : Path or None, optional
        Override for the output directory.
    verbose : bool, optional
        Enable debug logging.
    """
    _configure_logging(verbose=verbose)
    site = _resolve_config(config, docs_dir, output_dir)
    for path in DocsPageBuilder(site).run():
        print(f"wrote {_format_path(path)}")


@app.command(help="Print the rendered HTML for one docs page.")
def render(
    href: typ.Annotated[
        str, Parameter(help="Docs path such as /docs/commands/run or commands/run")
    ] = "",
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    docs_dir: DocsDirOption = None,
    toc: typ.Annotated[bool, Parameter(help="Print the TOC instead of HTML")] = False,
    verbose: VerboseOption = False,
) -> None:
    """Render a single document to stdout.

    Exits with status 1 and a message on stderr when the path does not
    resolve to a document.
    """
    _configure_logging(verbose=verbose)
    site = _resolve_config(config, docs_dir)
    highlighter = HighlighterHandle(lambda: PygmentsHighlighter(site.pygments_style))
    renderer = DocRenderer(DocPathResolver(site.docs_dir), highlighter=highlighter)
    try:
        doc = renderer.render_slug(href_to_slug(href))
    except DocNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1) from exc
    if toc:
        for item in doc.toc:
            indent = "  " * (item.level - 2)
            print(f"{indent}- {item.text} (#{item.id})")
        return
    print(doc.html)


@app.command(help="Rebuild the JSON search index from the sidebar.")
def index(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    docs_dir: DocsDirOption = None,
    output: typ.Annotated[
        Path | None, Parameter(help="Override the search index output file")
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Write the search index without rendering any pages."""
    _configure_logging(verbose=verbose)
    site = _resolve_config(config, docs_dir)
    entries = DocsPageBuilder(site).build_search_index()
    path = write_search_index(entries, output or site.search_index_output)
    print(f"wrote {_format_path(path)} ({len(entries)} entries)")


@app.command(help="Search the docs index from the terminal.")
def search(
    query: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    docs_dir: DocsDirOption = None,
    index_file: typ.Annotated[
        Path | None, Parameter(help="Read a prebuilt search index JSON file")
    ] = None,
    verbose: VerboseOption = False,
) -> None:
    """Print ranked results for ``query``.

    The prebuilt index is used when ``--index-file`` is given; otherwise the
    index is built from the docs tree on the fly.
    """
    _configure_logging(verbose=verbose)
    if index_file is not None:
        entries = load_search_index(index_file)
    else:
        entries = DocsPageBuilder(_resolve_config(config, docs_dir)).build_search_index()

    if len(query) < MIN_QUERY_LENGTH:
        print(f"Type at least {MIN_QUERY_LENGTH} characters to search")
        return
    results = rank_entries(entries, query)
    if not results:
        print(f"No results for “{query}”")
        return
    for result in results:
        print(f"{result.score:>4}  {result.title}  [{result.section}]  {result.href}")
        if result.snippet:
            print(f"      {result.snippet}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``docs`` command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()

"""Render markdown documents into HTML, a title, and a table of contents.

The pipeline separates frontmatter, then converts the body with
Python-Markdown. A preprocessor swaps fenced code blocks for stashed Pygments
HTML before block parsing, and
:class:`~sreq_docs.markdown_ext.DocsExtension` assigns heading ids while it
collects the TOC.

The Pygments engine is owned by a :class:`HighlighterHandle`. It is built on
first use, at most once, and shared by every render that is given the same
handle.

Example
-------
>>> from pathlib import Path
>>> from sreq_docs.paths import DocPathResolver
>>> from sreq_docs.renderer import DocRenderer
>>> renderer = DocRenderer(DocPathResolver(Path("docs/content")))  # doctest: +SKIP
>>> doc = renderer.render_slug(["commands", "run"])  # doctest: +SKIP
>>> [item.id for item in doc.toc]  # doctest: +SKIP
['usage', 'flags']
"""

from __future__ import annotations

import logging
import re
import textwrap
import threading
import typing as typ
from html import escape

from markdown import Markdown
from markdown.extensions import Extension
from markdown.preprocessors import Preprocessor
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_all_lexers, get_lexer_by_name
from pygments.util import ClassNotFound

from ._constants import FALLBACK_TITLE
from .markdown_ext import DocsExtension
from .markdown_parser import extract_title, split_frontmatter
from .models import RenderedDoc

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .paths import DocPathResolver

logger = logging.getLogger(__name__)

CODE_BLOCK_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)```(?P<language>[A-Za-z0-9_+#.-]+)?[^\n]*\n"
    r"(?P<code>.*?)^[ \t]*```[ \t]*$",
    re.DOTALL | re.MULTILINE,
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
PLAINTEXT_LANGUAGE = "text"
DEFAULT_PYGMENTS_STYLE = "github-dark"
MARKDOWN_EXTENSIONS = ("tables", "sane_lists", "fenced_code")


class HighlightError(RuntimeError):
    """Raised when a code block cannot be highlighted."""


class Highlighter(typ.Protocol):
    """Anything that turns a code snippet into highlighted HTML."""

    def highlight(self, code: str, language: str | None) -> str:
        """Return highlighted HTML for ``code``."""
        ...


class PygmentsHighlighter:
    """Highlight code with Pygments using the ``codehilite`` CSS class."""

    def __init__(self, pygments_style: str = DEFAULT_PYGMENTS_STYLE) -> None:
        """Build the formatter and the table of supported language aliases.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for the stylesheet. Defaults to
            ``"github-dark"``.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self.languages = frozenset(
            alias.lower()
            for _name, aliases, *_rest in get_all_lexers()
            for alias in aliases
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def resolve_language(self, language: str | None) -> str:
        """Return ``language`` when Pygments supports it, else plaintext."""
        if language and language.lower() in self.languages:
            return language.lower()
        return PLAINTEXT_LANGUAGE

    def highlight(self, code: str, language: str | None) -> str:
        """Render ``code`` as highlighted HTML tagged with ``data-language``.

        Raises
        ------
        HighlightError
            When Pygments cannot provide a lexer or fails while formatting.
        """
        lang = self.resolve_language(language)
        try:
            lexer = get_lexer_by_name(lang)
            html = highlight(code, lexer, self._formatter)
        except (ClassNotFound, ValueError) as exc:
            msg = f"Pygments failed to highlight a '{lang}' block: {exc}"
            raise HighlightError(msg) from exc
        safe_lang = escape(lang, quote=True)
        return CODEHILITE_OPEN_TAG.sub(
            f'<div class="codehilite" data-language="{safe_lang}">', html, 1
        )


class HighlighterHandle:
    """Own a highlighter that is constructed lazily and exactly once.

    Concurrent first calls to :meth:`acquire` wait for the same construction
    instead of building duplicates; later calls return the cached instance
    without locking.
    """

    def __init__(
        self, factory: cabc.Callable[[], Highlighter] | None = None
    ) -> None:
        self._factory = factory or PygmentsHighlighter
        self._instance: Highlighter | None = None
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        """Return whether the highlighter has been constructed."""
        return self._instance is not None

    def acquire(self) -> Highlighter:
        """Return the shared highlighter, building it on first use."""
        instance = self._instance
        if instance is not None:
            return instance
        with self._lock:
            if self._instance is None:
                logger.debug("initialising syntax highlighter")
                self._instance = self._factory()
            return self._instance


def _plain_code_block(code: str, language: str | None) -> str:
    """Return an unstyled, escaped ``<pre><code>`` block."""
    lang = escape(language or PLAINTEXT_LANGUAGE, quote=True)
    return f'<pre><code class="language-{lang}">{escape(code)}</code></pre>\n'


def _dedent(code: str, indent: str) -> str:
    """Remove the opening fence's indent from each line of ``code``."""
    if not indent:
        return code
    return "".join(line.removeprefix(indent) for line in code.splitlines(keepends=True))


def highlight_code_blocks(
    text: str,
    highlighter: Highlighter,
    store: cabc.Callable[[str], str] | None = None,
) -> str:
    """Replace fenced code blocks in ``text`` with highlighted HTML.

    Replacements are computed in source order and applied from the last
    block to the first, so the offsets recorded for earlier blocks stay valid
    whatever length each replacement has. A block that fails to highlight is
    replaced with an unstyled code block instead.

    Parameters
    ----------
    text : str
        Markdown source.
    highlighter : Highlighter
        Engine used for every block.
    store : Callable[[str], str], optional
        Stash for rendered HTML, normally ``Markdown.htmlStash.store``. When
        given, each block is replaced by the returned placeholder, indented
        like its opening fence so blocks nested in list items stay there.
        Without it the HTML is inlined as a raw block.
    """
    replacements: list[tuple[int, int, str]] = []
    for match in CODE_BLOCK_PATTERN.finditer(text):
        indent = match.group("indent")
        language = match.group("language")
        code = _dedent(match.group("code"), indent).rstrip()
        try:
            rendered = highlighter.highlight(code, language)
        except HighlightError as exc:
            logger.warning("falling back to a plain code block: %s", exc)
            rendered = _plain_code_block(code, language)
        if store is not None:
            block = f"{indent}{store(rendered)}"
        else:
            block = textwrap.indent(rendered, indent) if indent else rendered
        replacements.append((match.start(), match.end(), f"\n\n{block}\n\n"))

    result = text
    for start, end, replacement in reversed(replacements):
        result = result[:start] + replacement + result[end:]
    return result


class CodeHighlightPreprocessor(Preprocessor):
    """Stash highlighted fenced blocks before Markdown parses the text."""

    def __init__(self, md: Markdown, highlighter: Highlighter) -> None:
        super().__init__(md)
        self.highlighter = highlighter

    def run(self, lines: list[str]) -> list[str]:
        text = highlight_code_blocks(
            "\n".join(lines), self.highlighter, self.md.htmlStash.store
        )
        return text.split("\n")


class CodeHighlightExtension(Extension):
    """Highlight fenced code with ``highlighter`` ahead of ``fenced_code``.

    The preprocessor runs after whitespace normalisation (priority 30) and
    before the fenced code (25) and raw HTML (20) preprocessors.
    """

    def __init__(self, highlighter: Highlighter, **kwargs: typ.Any) -> None:
        super().__init__(**kwargs)
        self.highlighter = highlighter

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the highlighting preprocessor."""
        md.preprocessors.register(
            CodeHighlightPreprocessor(md, self.highlighter), "sreq_highlight", 27
        )


def _resolve_title(
    meta: cabc.Mapping[str, typ.Any], body: str, slug: cabc.Sequence[str]
) -> str:
    """Pick the frontmatter title, first h1, last slug segment, or fallback."""
    declared = meta.get("title")
    if declared:
        return str(declared)
    heading = extract_title(body)
    if heading:
        return heading
    if slug and slug[-1]:
        return slug[-1]
    return FALLBACK_TITLE


class DocRenderer:
    """Render documentation markdown with highlighted code and anchors."""

    def __init__(
        self,
        resolver: DocPathResolver | None = None,
        *,
        highlighter: HighlighterHandle | None = None,
    ) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        resolver : DocPathResolver, optional
            Resolver used by :meth:`render_slug`. Only :meth:`render_text` is
            available without one.
        highlighter : HighlighterHandle, optional
            Shared highlighter handle; a private Pygments handle is created
            when omitted.
        """
        self.resolver = resolver
        self.highlighter = highlighter or HighlighterHandle()

    def render_slug(self, slug: cabc.Sequence[str]) -> RenderedDoc:
        """Resolve ``slug`` to a file and render it.

        Raises
        ------
        DocNotFoundError
            When the slug does not resolve to a document.
        ValueError
            When the renderer was created without a resolver.
        """
        if self.resolver is None:
            msg = "DocRenderer needs a resolver to render by slug."
            raise ValueError(msg)
        path = self.resolver.resolve(slug)
        raw = path.read_text(encoding="utf-8")
        return self.render_text(raw, slug)

    def render_text(self, raw: str, slug: cabc.Sequence[str] = ()) -> RenderedDoc:
        """Render raw document text, including optional frontmatter."""
        meta, body = split_frontmatter(raw)
        extension = DocsExtension()
        md = Markdown(
            extensions=[
                *MARKDOWN_EXTENSIONS,
                CodeHighlightExtension(self.highlighter.acquire()),
                extension,
            ]
        )
        html = md.convert(body)
        return RenderedDoc(
            html=html,
            toc=tuple(extension.toc_items),
            meta=meta,
            title=_resolve_title(meta, body, slug),
        )


__all__ = [
    "CODE_BLOCK_PATTERN",
    "CodeHighlightExtension",
    "DocRenderer",
    "HighlightError",
    "Highlighter",
    "HighlighterHandle",
    "PygmentsHighlighter",
    "highlight_code_blocks",
]

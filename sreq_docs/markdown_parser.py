r"""Text-level helpers for markdown documentation sources.

This module owns the pieces of markdown handling that operate on raw text
rather than on a rendered tree: the shared heading ``slugify`` function,
frontmatter separation, first-heading title lookup, and the ordered syntax
stripping that turns a document body into plain searchable text.

Example
-------
>>> from sreq_docs.markdown_parser import slugify, split_frontmatter
>>> slugify("Run `sreq` Requests!")
'run-sreq-requests'
>>> meta, body = split_frontmatter("---\ntitle: Intro\n---\n# Hello\n")
>>> meta["title"], body
('Intro', '# Hello\n')
"""

from __future__ import annotations

import logging
import re
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)
TITLE_PATTERN = re.compile(r"^#\s+(.+)$", re.MULTILINE)

_SLUG_DISALLOWED = re.compile(r"[^\w\s-]")
_SLUG_WHITESPACE = re.compile(r"\s+")

# Order matters: later patterns assume earlier delimiters are already gone.
_PLAIN_TEXT_STEPS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"```.*?```", re.DOTALL), ""),
    (re.compile(r"`[^`]+`"), ""),
    (re.compile(r"#{1,6}\s+"), ""),
    (re.compile(r"\[([^\]]+)\]\([^)]+\)"), r"\1"),
    (re.compile(r"[*_~]+"), ""),
    (re.compile(r"\|[^\n]+"), ""),
    (re.compile(r"-{3,}"), ""),
    (re.compile(r">\s+"), ""),
    (re.compile(r"\s+"), " "),
)


def slugify(text: str) -> str:
    """Return the anchor id for a heading's visible text.

    The text is lowercased, every character that is not a word character,
    whitespace, or hyphen is removed, and whitespace runs become single
    hyphens. Edge whitespace is not trimmed, so ``"Flags (?)"`` gives
    ``"flags-"``. The function is idempotent.
    """
    cleaned = _SLUG_DISALLOWED.sub("", text.lower())
    return _SLUG_WHITESPACE.sub("-", cleaned)


def unique_slug(base: str, used: set[str]) -> str:
    """Return ``base`` or a ``-N`` suffixed variant not yet in ``used``."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def _load_yaml_mapping(block: str) -> dict[str, typ.Any] | None:
    """Parse a frontmatter block, returning ``None`` when it is not a mapping."""
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        loaded = loader.load(block)
    except YAMLError as exc:
        logger.warning("ignoring unparsable frontmatter: %s", exc)
        return None
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        logger.warning("ignoring frontmatter that is not a mapping")
        return None
    return {str(key): value for key, value in loaded.items()}


def split_frontmatter(raw: str) -> tuple[dict[str, typ.Any], str]:
    """Separate a leading ``---`` delimited metadata block from the body.

    Parameters
    ----------
    raw : str
        Full document text.

    Returns
    -------
    tuple[dict[str, Any], str]
        The metadata mapping (empty when absent or invalid) and the remaining
        body text. Invalid blocks leave ``raw`` untouched as the body.
    """
    match = FRONTMATTER_PATTERN.match(raw)
    if not match:
        return {}, raw
    meta = _load_yaml_mapping(match.group(1) or "")
    if meta is None:
        return {}, raw
    return meta, raw[match.end() :]


def extract_title(body: str) -> str | None:
    """Return the text of the first level-one heading in ``body``, if any."""
    match = TITLE_PATTERN.search(body)
    if not match:
        return None
    return match.group(1).strip() or None


def strip_markdown(body: str, limit: int | None = None) -> str:
    """Reduce markdown to single-spaced plain text, optionally truncated.

    Fenced code, inline code, heading markers, link targets, emphasis
    markers, table rows, horizontal rules, and blockquote markers are removed
    in that order before whitespace is collapsed.
    """
    text = body
    for pattern, replacement in _PLAIN_TEXT_STEPS:
        text = pattern.sub(replacement, text)
    text = text.strip()
    if limit is not None:
        text = text[:limit]
    return text


__all__ = [
    "extract_title",
    "slugify",
    "split_frontmatter",
    "strip_markdown",
    "unique_slug",
]

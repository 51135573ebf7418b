"""Load and validate the documentation site configuration YAML.

The configuration names the markdown docs tree, the sidebar file, where
rendered pages and the search index are written, and the highlighting style.
:func:`load_site_config` applies defaults and returns a :class:`SiteConfig`
ready for the renderer, navigation parser, and search index builder.

Examples
--------
>>> from pathlib import Path
>>> from sreq_docs.config import load_site_config
>>> site = load_site_config(Path("config/docs.yaml"))  # doctest: +SKIP
>>> site.sidebar_path  # doctest: +SKIP
PosixPath('docs/content/_sidebar.md')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from ._constants import SEARCH_CONTENT_LIMIT, SIDEBAR_FILENAME
from .renderer import DEFAULT_PYGMENTS_STYLE

DEFAULT_OUTPUT_DIR = Path("public")
DEFAULT_SITE_NAME = "sreq docs"
SEARCH_INDEX_FILENAME = "search-index.json"


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteConfig:
    """Resolved settings for rendering and indexing the docs tree.

    Attributes
    ----------
    docs_dir : Path
        Root directory of the markdown sources.
    sidebar_path : Path
        Navigation file defining sidebar, reading order, and index membership.
    output_dir : Path
        Directory receiving rendered HTML pages.
    search_index_output : Path
        JSON file receiving the serialized search index.
    pygments_style : str
        Pygments style used for highlighted code.
    site_name : str
        Name appended to page titles.
    search_content_limit : int
        Maximum plain-text characters stored per search entry.
    """

    docs_dir: Path
    sidebar_path: Path
    output_dir: Path = DEFAULT_OUTPUT_DIR
    search_index_output: Path = DEFAULT_OUTPUT_DIR / SEARCH_INDEX_FILENAME
    pygments_style: str = DEFAULT_PYGMENTS_STYLE
    site_name: str = DEFAULT_SITE_NAME
    search_content_limit: int = SEARCH_CONTENT_LIMIT

    @classmethod
    def for_docs_dir(cls, docs_dir: Path, **overrides: typ.Any) -> SiteConfig:
        """Build a config with defaults derived from ``docs_dir``."""
        output_dir = Path(overrides.pop("output_dir", DEFAULT_OUTPUT_DIR))
        return cls(
            docs_dir=docs_dir,
            sidebar_path=overrides.pop("sidebar_path", docs_dir / SIDEBAR_FILENAME),
            output_dir=output_dir,
            search_index_output=overrides.pop(
                "search_index_output", output_dir / SEARCH_INDEX_FILENAME
            ),
            **overrides,
        )


def _positive_int(value: object, key: str) -> int:
    """Return ``value`` as a positive int or raise :class:`SiteConfigError`."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        msg = f"'{key}' must be a positive integer, got {value!r}."
        raise SiteConfigError(msg)
    return value


def _resolve_relative(base: Path, value: str | None, default: Path) -> Path:
    """Return ``value`` as a path relative to ``base``, or ``default``."""
    if not value:
        return default
    candidate = Path(value)
    return candidate if candidate.is_absolute() else base / candidate


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the docs site.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file.

    Returns
    -------
    SiteConfig
        Parsed configuration with defaults applied. Relative ``docs_dir``,
        ``output_dir``, and ``search_index_output`` values are resolved
        against the configuration file's directory; ``sidebar`` is resolved
        against ``docs_dir``.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SiteConfigError
        If ``docs_dir`` is missing or a value is invalid.
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    docs_dir_value = raw.get("docs_dir")
    if not docs_dir_value:
        msg = "Configuration must define 'docs_dir'."
        raise SiteConfigError(msg)

    base = path.parent
    docs_dir = _resolve_relative(base, str(docs_dir_value), base)
    output_dir = _resolve_relative(base, raw.get("output_dir"), base / DEFAULT_OUTPUT_DIR)
    sidebar_path = _resolve_relative(
        docs_dir, raw.get("sidebar"), docs_dir / SIDEBAR_FILENAME
    )
    search_index_output = _resolve_relative(
        base, raw.get("search_index_output"), output_dir / SEARCH_INDEX_FILENAME
    )
    limit = _positive_int(
        raw.get("search_content_limit", SEARCH_CONTENT_LIMIT), "search_content_limit"
    )

    return SiteConfig(
        docs_dir=docs_dir,
        sidebar_path=sidebar_path,
        output_dir=output_dir,
        search_index_output=search_index_output,
        pygments_style=str(raw.get("pygments_style", DEFAULT_PYGMENTS_STYLE)),
        site_name=str(raw.get("site_name", DEFAULT_SITE_NAME)),
        search_content_limit=limit,
    )


__all__ = ["SiteConfig", "SiteConfigError", "load_site_config"]

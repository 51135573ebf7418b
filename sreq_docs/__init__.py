"""Render the sreq markdown docs tree and search it.

This package resolves documentation slugs to markdown files, renders them to
HTML with highlighted code and a table of contents, parses the sidebar
navigation file, and builds and ranks the bundled search index. The ``docs``
console script exposes the same operations from the terminal.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from sreq_docs import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]

"""Common literal values used across sreq_docs.

These constants keep filenames, URL prefixes, and search limits centralized so
the renderer, navigation parser, search index, and tests import the same
values without drifting. Intended for internal use within the sreq_docs
package.

Examples
--------
>>> from sreq_docs import _constants
>>> _constants.DOCS_ROOT_HREF
'/docs'
>>> _constants.INDEX_FILENAME.endswith(_constants.DOC_EXTENSION)
True
"""

DOCS_ROOT_HREF = "/docs"
DOC_EXTENSION = ".md"
INDEX_FILENAME = f"README{DOC_EXTENSION}"
SIDEBAR_FILENAME = f"_sidebar{DOC_EXTENSION}"
HIDDEN_PREFIX = "_"

FALLBACK_TITLE = "Docs"
DEFAULT_SECTION_LABEL = "Getting Started"

SEARCH_CONTENT_LIMIT = 500
MAX_SEARCH_RESULTS = 10
MIN_QUERY_LENGTH = 2
SNIPPET_LEADING_CHARS = 40
SNIPPET_TRAILING_CHARS = 80
ELLIPSIS = "..."

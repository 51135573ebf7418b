"""Interactive search session driving the documentation search modal.

A :class:`SearchSession` owns the query, the ranked results, and the active
selection for one open modal. Every keystroke recomputes the results
synchronously from the prebuilt index. Opening the session always starts
from a blank state, so nothing from a previous open survives a close.

Example
-------
>>> from sreq_docs.models import SearchEntry
>>> from sreq_docs.search_session import SearchSession, SessionState
>>> visited: list[str] = []
>>> session = SearchSession(
...     [SearchEntry("Run", "/docs/commands/run", "Commands", "")], visited.append
... )
>>> session.open()
>>> session.set_query("ru")
>>> session.state is SessionState.OPEN_RESULTS
True
>>> session.press("Enter")
>>> visited, session.state is SessionState.CLOSED
(['/docs/commands/run'], True)
"""

from __future__ import annotations

import enum
import logging
import typing as typ

from ._constants import MIN_QUERY_LENGTH
from .search import rank_entries

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import SearchEntry, SearchResult

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    """Visible states of the search modal."""

    CLOSED = "closed"
    OPEN_EMPTY = "open-empty"
    OPEN_RESULTS = "open-results"
    OPEN_NO_MATCH = "open-no-match"


class Key(enum.StrEnum):
    """Keys the session reacts to; anything else is ignored."""

    ARROW_DOWN = "ArrowDown"
    ARROW_UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


class SearchSession:
    """Query, results, and active selection for one search modal."""

    def __init__(
        self,
        entries: cabc.Sequence[SearchEntry],
        navigate: cabc.Callable[[str], None],
    ) -> None:
        """Bind the session to an index and a navigation callback.

        Parameters
        ----------
        entries : Sequence[SearchEntry]
            Prebuilt, immutable search index.
        navigate : Callable[[str], None]
            Called with a result's href when it is activated.
        """
        self.entries = entries
        self._navigate = navigate
        self.is_open = False
        self.query = ""
        self.results: list[SearchResult] = []
        self.active_index = 0

    @property
    def state(self) -> SessionState:
        """Return the state derived from openness, query, and results."""
        if not self.is_open:
            return SessionState.CLOSED
        if len(self.query) < MIN_QUERY_LENGTH:
            return SessionState.OPEN_EMPTY
        if not self.results:
            return SessionState.OPEN_NO_MATCH
        return SessionState.OPEN_RESULTS

    @property
    def active_result(self) -> SearchResult | None:
        """Return the highlighted result, if any."""
        if 0 <= self.active_index < len(self.results):
            return self.results[self.active_index]
        return None

    def open(self) -> None:
        """Open the modal with an empty query and no selection history."""
        self._reset()
        self.is_open = True

    def close(self) -> None:
        """Close the modal and discard its state."""
        self._reset()
        self.is_open = False

    def set_query(self, query: str) -> None:
        """Replace the query, re-rank, and move the selection to the top."""
        if not self.is_open:
            return
        self.query = query
        if len(query) < MIN_QUERY_LENGTH:
            self.results = []
        else:
            self.results = rank_entries(self.entries, query)
        self.active_index = 0

    def hover(self, index: int) -> None:
        """Make the result under the pointer the active one."""
        if self.is_open:
            self.active_index = self._clamp(index)

    def press(self, key: str) -> None:
        """Handle a key press against the current query and results."""
        if not self.is_open:
            return
        match key:
            case Key.ESCAPE:
                self.close()
            case Key.ARROW_DOWN:
                self.active_index = self._clamp(self.active_index + 1)
            case Key.ARROW_UP:
                self.active_index = self._clamp(self.active_index - 1)
            case Key.ENTER:
                self.activate()
            case _:
                return

    def activate(self, index: int | None = None) -> str | None:
        """Navigate to a result and close; return its href if one was chosen."""
        if not self.is_open:
            return None
        if index is not None:
            self.active_index = self._clamp(index)
        result = self.active_result
        if result is None:
            return None
        logger.debug("search navigating to %s", result.href)
        self.close()
        self._navigate(result.href)
        return result.href

    def _clamp(self, index: int) -> int:
        return max(0, min(index, len(self.results) - 1))

    def _reset(self) -> None:
        self.query = ""
        self.results = []
        self.active_index = 0


__all__ = ["Key", "SearchSession", "SessionState"]

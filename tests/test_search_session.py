"""State machine tests for the interactive search session."""

from __future__ import annotations

import pytest

from sreq_docs.models import SearchEntry
from sreq_docs.search_session import Key, SearchSession, SessionState

ENTRIES = [
    SearchEntry("Run", "/docs/commands/run", "Commands", "run a request"),
    SearchEntry("Running Guide", "/docs/guides/running", "Guides", "how to run"),
    SearchEntry("Env", "/docs/commands/env", "Commands", "environment files"),
]


@pytest.fixture
def visited() -> list[str]:
    return []


@pytest.fixture
def session(visited: list[str]) -> SearchSession:
    search = SearchSession(ENTRIES, visited.append)
    search.open()
    return search


def test_starts_closed(visited: list[str]) -> None:
    search = SearchSession(ENTRIES, visited.append)
    assert search.state is SessionState.CLOSED
    search.press(Key.ENTER)
    search.set_query("run")
    assert search.state is SessionState.CLOSED
    assert visited == []


def test_open_is_empty(session: SearchSession) -> None:
    assert session.state is SessionState.OPEN_EMPTY
    assert session.results == []


@pytest.mark.parametrize("query", ["", "r"])
def test_short_query_prompts_for_more(session: SearchSession, query: str) -> None:
    """Queries under two characters show the prompt, not "no results"."""
    session.set_query(query)
    assert session.state is SessionState.OPEN_EMPTY
    assert session.results == []


def test_matching_query_shows_results(session: SearchSession) -> None:
    session.set_query("run")
    assert session.state is SessionState.OPEN_RESULTS
    assert [r.title for r in session.results] == ["Run", "Running Guide"]
    assert session.active_index == 0


def test_unmatched_query_is_distinct_state(session: SearchSession) -> None:
    session.set_query("zzz")
    assert session.state is SessionState.OPEN_NO_MATCH


def test_arrow_keys_clamp_at_both_ends(session: SearchSession) -> None:
    """The selection never wraps."""
    session.set_query("run")
    session.press(Key.ARROW_UP)
    assert session.active_index == 0
    session.press(Key.ARROW_DOWN)
    session.press(Key.ARROW_DOWN)
    session.press(Key.ARROW_DOWN)
    assert session.active_index == 1
    session.press(Key.ARROW_UP)
    assert session.active_index == 0


def test_arrow_keys_without_results(session: SearchSession) -> None:
    session.set_query("zzz")
    session.press(Key.ARROW_DOWN)
    session.press(Key.ARROW_UP)
    assert session.active_index == 0
    assert session.active_result is None


def test_query_change_resets_selection(session: SearchSession) -> None:
    session.set_query("run")
    session.press(Key.ARROW_DOWN)
    session.set_query("runn")
    assert session.active_index == 0


def test_enter_navigates_and_closes(
    session: SearchSession, visited: list[str]
) -> None:
    session.set_query("run")
    session.press(Key.ARROW_DOWN)
    session.press(Key.ENTER)
    assert visited == ["/docs/guides/running"]
    assert session.state is SessionState.CLOSED


def test_enter_without_results_does_nothing(
    session: SearchSession, visited: list[str]
) -> None:
    session.set_query("zzz")
    session.press(Key.ENTER)
    assert visited == []
    assert session.state is SessionState.OPEN_NO_MATCH


def test_escape_closes_without_navigation(
    session: SearchSession, visited: list[str]
) -> None:
    session.set_query("run")
    session.press(Key.ESCAPE)
    assert session.state is SessionState.CLOSED
    assert visited == []


def test_reopen_starts_blank(session: SearchSession) -> None:
    """Closing discards the query, results, and selection."""
    session.set_query("run")
    session.press(Key.ARROW_DOWN)
    session.close()
    session.open()
    assert (session.query, session.results, session.active_index) == ("", [], 0)
    assert session.state is SessionState.OPEN_EMPTY


def test_hover_moves_selection(session: SearchSession, visited: list[str]) -> None:
    session.set_query("run")
    session.hover(1)
    assert session.active_result is not None
    assert session.active_result.href == "/docs/guides/running"
    session.hover(7)
    assert session.active_index == 1


def test_activate_by_index(session: SearchSession, visited: list[str]) -> None:
    """Clicking a result navigates to it directly."""
    session.set_query("run")
    assert session.activate(1) == "/docs/guides/running"
    assert visited == ["/docs/guides/running"]
    assert session.state is SessionState.CLOSED


@pytest.mark.parametrize("key", ["Tab", "a", "ArrowLeft", "enter"])
def test_other_keys_are_ignored(session: SearchSession, key: str) -> None:
    session.set_query("run")
    session.press(key)
    assert session.state is SessionState.OPEN_RESULTS
    assert session.active_index == 0


def test_plain_string_keys_are_accepted(
    session: SearchSession, visited: list[str]
) -> None:
    session.set_query("env")
    session.press("Enter")
    assert visited == ["/docs/commands/env"]

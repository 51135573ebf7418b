"""Behaviour tests for rendered documentation pages.

These scenarios render pages from the bundled ``docs/content`` tree through
``DocsPageBuilder`` and inspect the HTML with BeautifulSoup, checking that
table of contents links resolve to heading ids, code samples carry their
language, code nested in numbered steps stays inside its list item, and unknown
paths produce a Not Found page.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from pytest_bdd import given, parsers, scenarios, then, when

from sreq_docs.config import SiteConfig
from sreq_docs.paths import href_to_slug
from sreq_docs.site import DocsPageBuilder

REPO_ROOT = Path(__file__).resolve().parents[2]
FEATURE_FILE = REPO_ROOT / "features" / "doc_page.feature"
scenarios(FEATURE_FILE)


@pytest.fixture
def scenario_state() -> dict[str, object]:
    """Return a mutable dict used to share scenario state across BDD steps."""
    return {}


def _soup(scenario_state: dict[str, object]) -> BeautifulSoup:
    soup = scenario_state["soup"]
    assert isinstance(soup, BeautifulSoup)
    return soup


@given("the bundled sreq docs site")
def given_site(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    site = SiteConfig.for_docs_dir(
        REPO_ROOT / "docs" / "content", output_dir=tmp_path / "public"
    )
    scenario_state["builder"] = DocsPageBuilder(site)


@given("a docs site whose page nests a code sample in a numbered list")
def given_nested_site(tmp_path: Path, scenario_state: dict[str, object]) -> None:
    docs = tmp_path / "content"
    docs.mkdir()
    (docs / "_sidebar.md").write_text("- [Steps](/steps)\n", encoding="utf-8")
    (docs / "steps.md").write_text(
        "# Steps\n\n"
        "1. Install:\n\n"
        "    ```bash\n"
        "    brew install sreq\n"
        "    ```\n\n"
        "2. Run `sreq run`\n",
        encoding="utf-8",
    )
    site = SiteConfig.for_docs_dir(docs, output_dir=tmp_path / "public")
    scenario_state["builder"] = DocsPageBuilder(site)


@when(parsers.parse('I render the page at "{href}"'))
def when_render(scenario_state: dict[str, object], href: str) -> None:
    builder = scenario_state["builder"]
    assert isinstance(builder, DocsPageBuilder)
    html = builder.render_html(builder.page(href_to_slug(href)))
    scenario_state["soup"] = BeautifulSoup(html, "html.parser")


@then("every table of contents link targets a heading on the page")
def then_toc_targets(scenario_state: dict[str, object]) -> None:
    soup = _soup(scenario_state)
    targets = [a["href"] for a in soup.select("aside.docs-toc a")]
    headings = soup.select("article.docs-content h2, article.docs-content h3")
    ids = [f"#{h['id']}" for h in headings]
    assert targets, "expected a table of contents"
    assert targets == ids


@then(parsers.parse('the code sample is highlighted as "{language}"'))
def then_highlighted(scenario_state: dict[str, object], language: str) -> None:
    block = _soup(scenario_state).select_one("div.codehilite")
    assert block is not None
    assert block.get("data-language") == language


@then(parsers.parse('the previous link points to "{href}"'))
def then_previous(scenario_state: dict[str, object], href: str) -> None:
    link = _soup(scenario_state).select_one("a.docs-prev-next__prev")
    assert link is not None
    assert link["href"] == href


@then(parsers.parse('the page heading is "{text}"'))
def then_heading(scenario_state: dict[str, object], text: str) -> None:
    heading = _soup(scenario_state).select_one("main h1")
    assert heading is not None
    assert heading.get_text(strip=True) == text


@then(parsers.parse("the numbered list has {count:d} steps"))
def then_list_steps(scenario_state: dict[str, object], count: int) -> None:
    lists = _soup(scenario_state).select("article.docs-content ol")
    assert len(lists) == 1
    assert len(lists[0].find_all("li", recursive=False)) == count


@then(parsers.parse('the code sample starts with "{text}"'))
def then_code_starts_with(scenario_state: dict[str, object], text: str) -> None:
    block = _soup(scenario_state).select_one("article.docs-content div.codehilite")
    assert block is not None
    assert block.get_text().startswith(text)

"""Unit tests for the sidebar grammar and the flattened reading order.

The parser is exercised line by line (``classify_line``) and end to end
(``parse_sidebar_text``), covering leading unheaded links, dropped external
links, href normalisation, ignored noise, and empty sections. The flat
navigator tests check previous/next lookups at both ends and in the middle.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from sreq_docs.models import SidebarLink, SidebarSection
from sreq_docs.navigation import (
    HeadingLine,
    LinkLine,
    adjacent_links,
    classify_line,
    flatten_sidebar,
    load_sidebar,
    parse_sidebar_text,
    target_to_href,
)

SIDEBAR = """\
- [Introduction](/)
- [Installation](/installation)

Some prose that is not part of the grammar.

- **Commands**
- [Overview](/commands/)
  - [run](/commands/run)
- [GitHub](https://github.com/sreq/sreq)

- **Empty**

- **Guides**
- [Providers](guides/providers/)
- [Mail us](mailto:team@example.com)
"""


def test_example_from_grammar() -> None:
    """A heading followed by an internal and an external link."""
    sections = parse_sidebar_text(
        "- **Commands**\n- [Run](/commands/run)\n- [External](https://example.com)"
    )
    assert sections == [
        SidebarSection(
            heading="Commands",
            links=(SidebarLink(label="Run", href="/docs/commands/run"),),
        )
    ]


def test_full_sidebar_structure() -> None:
    """Sections keep source order, including leading and empty groups."""
    sections = parse_sidebar_text(SIDEBAR)
    assert [section.heading for section in sections] == [
        "",
        "Commands",
        "Empty",
        "Guides",
    ]
    assert [link.href for link in sections[0].links] == ["/docs", "/docs/installation"]
    assert [link.href for link in sections[1].links] == [
        "/docs/commands",
        "/docs/commands/run",
    ]
    assert sections[2].links == ()
    assert [link.href for link in sections[3].links] == ["/docs/guides/providers"]


def test_empty_input_yields_no_sections() -> None:
    """Blank or prose-only input produces an empty structure."""
    assert parse_sidebar_text("") == []
    assert parse_sidebar_text("\n\nJust words.\n") == []


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("- **Commands**", HeadingLine("Commands")),
        ("   - **Indented**  ", HeadingLine("Indented")),
        ("- [Run](/commands/run)", LinkLine("Run", "/commands/run")),
        ("- **Bold** trailing", None),
        ("* [Star](/x)", None),
        ("-[NoSpace](/x)", None),
        ("", None),
        ("Plain prose", None),
    ],
)
def test_classify_line(line: str, expected: HeadingLine | LinkLine | None) -> None:
    """Only whole-line heading and link bullets produce events."""
    assert classify_line(line) == expected


@pytest.mark.parametrize(
    ("target", "href"),
    [
        ("/", "/docs"),
        ("", "/docs"),
        ("/commands/", "/docs/commands"),
        ("commands/run", "/docs/commands/run"),
    ],
)
def test_target_to_href(target: str, href: str) -> None:
    """Leading and trailing slashes are stripped before prefixing."""
    assert target_to_href(target) == href


def test_load_sidebar_missing_file(tmp_path: Path) -> None:
    """A missing navigation file degrades to an empty sidebar."""
    assert load_sidebar(tmp_path / "_sidebar.md") == []


def test_load_sidebar_reads_file(tmp_path: Path) -> None:
    """The navigation file is parsed from disk."""
    path = tmp_path / "_sidebar.md"
    path.write_text("- [Intro](/)\n", encoding="utf-8")
    assert load_sidebar(path) == [
        SidebarSection(heading="", links=(SidebarLink("Intro", "/docs"),))
    ]


@pytest.fixture
def flat() -> list[SidebarLink]:
    return flatten_sidebar(parse_sidebar_text(SIDEBAR))


def test_flatten_discards_section_boundaries(flat: list[SidebarLink]) -> None:
    """Links from every section appear in one ordered list."""
    assert [link.label for link in flat] == [
        "Introduction",
        "Installation",
        "Overview",
        "run",
        "Providers",
    ]


def test_first_entry_has_no_previous(flat: list[SidebarLink]) -> None:
    neighbours = adjacent_links(flat, "/docs")
    assert neighbours.prev is None
    assert neighbours.next == SidebarLink("Installation", "/docs/installation")


def test_last_entry_has_no_next(flat: list[SidebarLink]) -> None:
    neighbours = adjacent_links(flat, "/docs/guides/providers")
    assert neighbours.prev == SidebarLink("run", "/docs/commands/run")
    assert neighbours.next is None


def test_middle_entry_crosses_sections(flat: list[SidebarLink]) -> None:
    """Neighbours ignore section headings."""
    neighbours = adjacent_links(flat, "/docs/commands")
    assert neighbours.prev == SidebarLink("Installation", "/docs/installation")
    assert neighbours.next == SidebarLink("run", "/docs/commands/run")


def test_unknown_href_has_no_neighbours(flat: list[SidebarLink]) -> None:
    neighbours = adjacent_links(flat, "/docs/nowhere")
    assert (neighbours.prev, neighbours.next) == (None, None)

"""Line scanner for the heading conventions used by coverage documents.

This is not a general markdown parser. It recognises ATX headings only
and splits a document into records, one per heading, each owning the
lines up to the next heading of any level. Larger units (a ``## ADDED
Tests`` section, a ``### Test:`` block) are spans of consecutive records
ending at the next heading of the same or a higher level; ``section_end``
is the one place that rule lives.

Records keep their line endings, so ``render(scan(text)) == text``.
"""

from __future__ import annotations

import re

from tddflow.models.coverage import MarkdownSection

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*?)[ \t]*$")
_TEST_PREFIX = "Test:"
TEST_LEVEL = 3
SECTION_LEVEL = 2


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` for an ATX heading line, else ``None``."""
    match = _HEADING_RE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return len(match.group(1)), match.group(2)


def scan(text: str) -> list[MarkdownSection]:
    """Split ``text`` into heading records.

    The first record is always the level-0 preamble (possibly empty).
    """
    sections: list[MarkdownSection] = []
    level, heading, lines = 0, None, []

    for line in text.splitlines(keepends=True):
        parsed = parse_heading(line)
        if parsed is None:
            lines.append(line)
            continue
        sections.append(MarkdownSection(level=level, heading=heading, lines=lines))
        level, heading = parsed
        lines = [line]

    sections.append(MarkdownSection(level=level, heading=heading, lines=lines))
    return sections


def render(sections: list[MarkdownSection]) -> str:
    return "".join(s.text for s in sections)


def section_end(sections: list[MarkdownSection], index: int) -> int:
    """Index just past the span that starts at ``sections[index]``.

    The span ends at the next record whose level is the same or higher
    (numerically less or equal), or at the end of input.
    """
    level = sections[index].level
    for pos in range(index + 1, len(sections)):
        if 0 < sections[pos].level <= level:
            return pos
    return len(sections)


def body_text(sections: list[MarkdownSection], index: int) -> str:
    """Text of the span at ``index`` without its heading line."""
    end = section_end(sections, index)
    rest = sections[index].lines[1:]
    return "".join(rest) + render(sections[index + 1:end])


def span_text(sections: list[MarkdownSection], index: int) -> str:
    """Text of the span at ``index`` including its heading line."""
    return render(sections[index:section_end(sections, index)])


def block_name(section: MarkdownSection) -> str | None:
    """Name of a ``### Test: <name>`` record, or ``None``."""
    if section.level != TEST_LEVEL or section.heading is None:
        return None
    if not section.heading.startswith(_TEST_PREFIX):
        return None
    name = section.heading[len(_TEST_PREFIX):].strip()
    return name or None


def find_heading(
    sections: list[MarkdownSection], level: int, heading: str
) -> int | None:
    """Index of the first record with exactly this level and heading text."""
    for index, section in enumerate(sections):
        if section.level == level and section.heading == heading:
            return index
    return None


def find_block(sections: list[MarkdownSection], name: str) -> int | None:
    """Index of the first ``### Test:`` record named ``name``."""
    for index, section in enumerate(sections):
        if block_name(section) == name:
            return index
    return None

"""Delta merge engine for coverage documents.

A delta document carries up to three optional sections::

    ## ADDED Tests       free text appended verbatim
    ## MODIFIED Tests    ### Test: blocks replacing same-named blocks
    ## REMOVED Tests     ### Test: headings naming blocks to delete

Merge order against an existing document is fixed: ADDED, then REMOVED,
then MODIFIED. Missing or malformed sections are no-ops, never errors.
Block names are compared as literal strings.
"""

from __future__ import annotations

import logging
import re

from tddflow.core.markdown import (
    SECTION_LEVEL,
    block_name,
    body_text,
    find_block,
    find_heading,
    render,
    scan,
    section_end,
    span_text,
)
from tddflow.models.coverage import CoverageDocument, DeltaDocument, TestBlock

logger = logging.getLogger(__name__)

ADDED_HEADING = "ADDED Tests"
MODIFIED_HEADING = "MODIFIED Tests"
REMOVED_HEADING = "REMOVED Tests"

_BLANK_RUN_RE = re.compile(r"(\r?\n)(?:\r?\n){2,}")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def extract_section(text: str, heading: str) -> str | None:
    """Body of the first ``## <heading>`` section, or ``None`` if absent."""
    sections = scan(text)
    index = find_heading(sections, SECTION_LEVEL, heading)
    if index is None:
        return None
    return body_text(sections, index)


def extract_tests(section: str) -> list[TestBlock]:
    """Every ``### Test:`` block in ``section``, heading included, trimmed."""
    sections = scan(section)
    blocks: list[TestBlock] = []
    for index, record in enumerate(sections):
        name = block_name(record)
        if name is not None:
            blocks.append(TestBlock(name=name, content=span_text(sections, index).strip()))
    return blocks


def extract_test_names(section: str) -> list[str]:
    """Names of the ``### Test:`` headings in ``section``; bodies are ignored."""
    names = []
    for record in scan(section):
        name = block_name(record)
        if name is not None:
            names.append(name)
    return names


def parse_delta(text: str) -> DeltaDocument:
    added = extract_section(text, ADDED_HEADING)
    modified = extract_section(text, MODIFIED_HEADING)
    removed = extract_section(text, REMOVED_HEADING)
    return DeltaDocument(
        added=added,
        modified=extract_tests(modified) if modified is not None else None,
        removed=extract_test_names(removed) if removed is not None else None,
    )


def parse_coverage(text: str) -> CoverageDocument:
    """Read view of a coverage document.

    Headings between blocks that are not themselves test blocks (for
    example ``## Login`` grouping headings) are not represented.
    """
    sections = scan(text)
    starts = [i for i, record in enumerate(sections) if block_name(record) is not None]
    if not starts:
        return CoverageDocument(leading=text)

    blocks = [
        TestBlock(name=block_name(sections[i]), content=span_text(sections, i).strip())
        for i in starts
    ]
    return CoverageDocument(
        leading=render(sections[:starts[0]]),
        blocks=blocks,
        trailing=render(sections[section_end(sections, starts[-1]):]),
    )


# ---------------------------------------------------------------------------
# Block edits
# ---------------------------------------------------------------------------


def collapse_blank_lines(text: str) -> str:
    """Collapse runs of three or more line breaks to exactly two.

    The first break of a run sets the line ending kept, so CRLF text stays
    CRLF.
    """
    return _BLANK_RUN_RE.sub(r"\1\1", text)


def append_content(text: str, addition: str) -> str:
    """Append ``addition`` after ``text``, separated by one blank line."""
    if not text.strip():
        return addition.strip() + "\n"
    return text.rstrip() + "\n\n" + addition.strip() + "\n"


def remove_test(text: str, name: str) -> str:
    """Delete every block named ``name`` and normalise blank-line runs."""
    sections = scan(text)
    kept = []
    index = 0
    while index < len(sections):
        if block_name(sections[index]) == name:
            index = section_end(sections, index)
            continue
        kept.append(sections[index])
        index += 1
    return collapse_blank_lines(render(kept))


def replace_test(text: str, name: str, content: str) -> str:
    """Replace the first block named ``name`` with ``content``.

    When no such block exists the content is appended as a new block.
    """
    sections = scan(text)
    index = find_block(sections, name)
    if index is None:
        logger.debug("No block named %r to modify; appending it", name)
        return append_content(text, content)
    end = section_end(sections, index)
    return render(sections[:index]) + content.strip() + "\n\n" + render(sections[end:])


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def seed_from_delta(delta_text: str) -> str:
    """Build a fresh coverage document from a delta.

    The ``## ADDED Tests`` heading line is dropped and its body kept.
    MODIFIED and REMOVED sections have nothing to apply to and are
    discarded. Other text is kept in place.
    """
    sections = scan(delta_text)
    parts: list[str] = []
    index = 0
    while index < len(sections):
        record = sections[index]
        if record.level == SECTION_LEVEL and record.heading == ADDED_HEADING:
            parts.append("".join(record.lines[1:]))
            index += 1
        elif record.level == SECTION_LEVEL and record.heading in (
            MODIFIED_HEADING,
            REMOVED_HEADING,
        ):
            logger.warning(
                "Discarding '## %s' section: no main coverage document to apply it to",
                record.heading,
            )
            index = section_end(sections, index)
        else:
            parts.append(record.text)
            index += 1
    return collapse_blank_lines("".join(parts)).strip() + "\n"


def merge_delta(main_text: str | None, delta_text: str) -> str:
    """Apply a delta document to a main coverage document.

    Parameters
    ----------
    main_text:
        Current main document, or ``None`` when no file exists yet, in
        which case the result is seeded from the delta alone.
    delta_text:
        Raw delta markdown.

    Returns the merged text, ending with exactly one newline.
    """
    if main_text is None:
        return seed_from_delta(delta_text)

    delta = parse_delta(delta_text)
    result = main_text

    if delta.added is not None and delta.added.strip():
        result = append_content(result, delta.added)

    for name in delta.removed or []:
        result = remove_test(result, name)

    for block in delta.modified or []:
        result = replace_test(result, block.name, block.content)

    return result.rstrip() + "\n"

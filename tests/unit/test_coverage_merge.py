"""Tests for the delta merge engine."""

from __future__ import annotations

from tddflow.core.coverage import (
    extract_section,
    extract_test_names,
    extract_tests,
    merge_delta,
    parse_coverage,
    parse_delta,
    remove_test,
    replace_test,
    seed_from_delta,
)

MAIN = (
    "# Auth\n"
    "\n"
    "### Test: A\n"
    "- THEN a\n"
    "\n"
    "### Test: B\n"
    "- THEN b\n"
    "\n"
    "### Test: C\n"
    "- THEN c\n"
)


class TestParseDelta:
    def test_all_sections_absent(self):
        delta = parse_delta("# Just prose\n")
        assert delta.is_empty

    def test_sections_in_any_order(self):
        delta = parse_delta(
            "## REMOVED Tests\n\n### Test: Old\nreason\n\n"
            "## MODIFIED Tests\n\n### Test: Changed\n- THEN new\n\n"
            "## ADDED Tests\n\n### Test: New\n- THEN works\n"
        )
        assert delta.removed == ["Old"]
        assert [b.name for b in delta.modified] == ["Changed"]
        assert delta.modified[0].content == "### Test: Changed\n- THEN new"
        assert "### Test: New" in delta.added

    def test_section_ends_at_next_level_two_heading(self):
        text = "## ADDED Tests\n\n### Test: A\na\n\n## Notes\nignored\n"
        assert extract_section(text, "ADDED Tests") == "\n### Test: A\na\n\n"

    def test_missing_section_is_none(self):
        assert extract_section("## ADDED Tests\n", "REMOVED Tests") is None

    def test_removed_names_ignore_bodies(self):
        section = "### Test: One\nwhy it went\n### Test: Two\n"
        assert extract_test_names(section) == ["One", "Two"]

    def test_extract_tests_trims_content(self):
        (block,) = extract_tests("\n### Test: X\n- GIVEN g\n\n\n")
        assert block.content == "### Test: X\n- GIVEN g"


class TestParseCoverage:
    def test_blocks_and_leading_text(self):
        doc = parse_coverage(MAIN)
        assert doc.test_names == ["A", "B", "C"]
        assert doc.leading == "# Auth\n\n"
        assert doc.get_block("B").content == "### Test: B\n- THEN b"

    def test_document_without_blocks(self):
        doc = parse_coverage("# Empty\n")
        assert doc.blocks == []
        assert doc.leading == "# Empty\n"

    def test_trailing_text_after_last_block(self):
        doc = parse_coverage("### Test: A\na\n## Appendix\nmore\n")
        assert doc.trailing == "## Appendix\nmore\n"


class TestSeed:
    def test_added_only_becomes_document(self):
        delta = (
            "## ADDED Tests\n\n### Test: Login works\n"
            "- GIVEN valid creds\n- WHEN login\n- THEN success\n"
        )
        merged = merge_delta(None, delta)
        assert merged.count("### Test: Login works") == 1
        assert "## ADDED Tests" not in merged
        assert merged == (
            "### Test: Login works\n- GIVEN valid creds\n- WHEN login\n- THEN success\n"
        )

    def test_modified_and_removed_discarded(self):
        delta = (
            "# Auth coverage\n\n"
            "## ADDED Tests\n\n### Test: A\nbody\n\n"
            "## REMOVED Tests\n\n### Test: Z\n"
        )
        assert seed_from_delta(delta) == "# Auth coverage\n\n### Test: A\nbody\n"

    def test_modified_only_seeds_empty_document(self):
        assert seed_from_delta("## MODIFIED Tests\n\n### Test: X\nbody\n") == "\n"


class TestMerge:
    def test_added_appended_after_blank_line(self):
        existing = "# Auth Tests\n\n### Test: Existing test\n- GIVEN something\n- THEN works\n"
        delta = "## ADDED Tests\n\n### Test: New test\n- GIVEN new\n- THEN also works\n"
        merged = merge_delta(existing, delta)
        assert merged.count("### Test: Existing test") == 1
        assert merged.count("### Test: New test") == 1
        assert merged == (
            "# Auth Tests\n\n### Test: Existing test\n- GIVEN something\n- THEN works\n"
            "\n### Test: New test\n- GIVEN new\n- THEN also works\n"
        )

    def test_added_into_empty_document(self):
        merged = merge_delta("", "## ADDED Tests\n\n### Test: A\na\n")
        assert merged == "### Test: A\na\n"

    def test_removed_deletes_only_named_block(self):
        merged = merge_delta(MAIN, "## REMOVED Tests\n\n### Test: B\nNo longer relevant\n")
        assert merged == "# Auth\n\n### Test: A\n- THEN a\n\n### Test: C\n- THEN c\n"

    def test_removed_last_block(self):
        merged = merge_delta(MAIN, "## REMOVED Tests\n\n### Test: C\n")
        assert merged == "# Auth\n\n### Test: A\n- THEN a\n\n### Test: B\n- THEN b\n"

    def test_removal_collapses_blank_runs(self):
        text = "### Test: A\na\n\n\n\n### Test: B\nb\n\n\n\n### Test: C\nc\n"
        result = remove_test(text, "B")
        assert "\n\n\n" not in result
        assert result == "### Test: A\na\n\n### Test: C\nc\n"

    def test_removal_collapses_crlf_blank_runs(self):
        text = "### Test: A\r\na\r\n\r\n\r\n\r\n### Test: B\r\nb\r\n\r\n\r\n\r\n### Test: C\r\nc\r\n"
        result = remove_test(text, "B")
        assert result == "### Test: A\r\na\r\n\r\n### Test: C\r\nc\r\n"

    def test_remove_unknown_name_is_noop(self):
        assert remove_test(MAIN, "Missing") == MAIN

    def test_names_are_literal_not_patterns(self):
        text = "### Test: a.c (x)\none\n\n### Test: abc xx\ntwo\n"
        result = remove_test(text, "a.c (x)")
        assert "one" not in result
        assert "### Test: abc xx" in result

    def test_name_prefix_does_not_match(self):
        text = "### Test: Login works\nbody\n"
        assert remove_test(text, "Login") == text

    def test_modified_replaces_block_in_place(self):
        delta = "## MODIFIED Tests\n\n### Test: B\n- GIVEN new\n- THEN b2\n"
        merged = merge_delta(MAIN, delta)
        assert merged == (
            "# Auth\n\n### Test: A\n- THEN a\n\n"
            "### Test: B\n- GIVEN new\n- THEN b2\n\n"
            "### Test: C\n- THEN c\n"
        )

    def test_modified_missing_block_is_appended(self):
        delta = "## MODIFIED Tests\n\n### Test: D\n- THEN d\n"
        merged = merge_delta(MAIN, delta)
        assert merged == MAIN + "\n### Test: D\n- THEN d\n"

    def test_replace_test_helper(self):
        result = replace_test("### Test: X\nold\n", "X", "### Test: X\nnew")
        assert result == "### Test: X\nnew\n\n"

    def test_empty_delta_returns_existing(self):
        assert merge_delta(MAIN + "\n\n\n", "") == MAIN

    def test_added_applied_before_removed(self):
        """ADDED runs first, so a block both added and removed ends up gone."""
        delta = (
            "## REMOVED Tests\n\n### Test: A\n\n"
            "## ADDED Tests\n\n### Test: New\n- THEN n\n"
        )
        merged = merge_delta(MAIN, delta)
        assert "### Test: A\n" not in merged
        assert merged.endswith("### Test: New\n- THEN n\n")

    def test_remove_then_modify_same_block_appends(self):
        delta = (
            "## MODIFIED Tests\n\n### Test: A\n- THEN a2\n\n"
            "## REMOVED Tests\n\n### Test: A\n"
        )
        merged = merge_delta(MAIN, delta)
        assert merged.count("### Test: A") == 1
        assert merged.endswith("### Test: A\n- THEN a2\n")

    def test_malformed_sections_are_noops(self):
        delta = "## REMOVED Tests\n\nnothing structured here\n\n## MODIFIED Tests\n"
        assert merge_delta(MAIN, delta) == MAIN

    def test_merge_is_repeatable_for_removals(self):
        delta = "## REMOVED Tests\n\n### Test: B\n"
        once = merge_delta(MAIN, delta)
        assert merge_delta(once, delta) == once

"""Tests for change creation, listing and task progress."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from tddflow.core import paths
from tddflow.core.changes import (
    count_incomplete_tasks,
    create_change,
    detect_artifacts,
    get_change,
    get_change_states,
    list_archived,
    list_changes,
    parse_task_progress,
)
from tddflow.core.errors import NotFoundError
from tddflow.core.project import read_yaml
from tddflow.models.schema import ArtifactStatus


class TestTaskProgress:
    def test_counts_checked_and_unchecked(self):
        progress = parse_task_progress("- [x] a\n- [ ] b\n  - [X] c\n- [ ] d\n")
        assert progress.total == 4
        assert progress.completed == 2
        assert progress.incomplete == 2

    def test_none_without_checkboxes(self):
        assert parse_task_progress("# Tasks\n\nNothing to tick.\n") is None

    def test_checkbox_must_start_the_line(self):
        assert parse_task_progress("See - [ ] in prose\n") is None

    def test_count_incomplete(self):
        assert count_incomplete_tasks("- [x] 1.1 Done\n- [ ] 2.1 Todo\n") == 1
        assert count_incomplete_tasks("no tasks") == 0


class TestCreateChange:
    def test_writes_metadata(self, project_root: Path):
        now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
        meta = create_change(project_root, "add-login", now=now)

        assert meta.schema_name == "test-driven"
        data = read_yaml(paths.change_meta_path(project_root, "add-login"))
        assert data == {
            "schema": "test-driven",
            "created": "2026-05-01T12:00:00+00:00",
            "name": "add-login",
        }

    def test_duplicate_rejected(self, project_root: Path):
        create_change(project_root, "twice")
        with pytest.raises(FileExistsError):
            create_change(project_root, "twice")

    def test_unknown_schema_rejected(self, project_root: Path):
        with pytest.raises(NotFoundError):
            create_change(project_root, "x", schema_name="nope")
        assert not paths.change_dir(project_root, "x").exists()

    @pytest.mark.parametrize("name", ["", "a/b", "archive", ".."])
    def test_invalid_names(self, project_root: Path, name: str):
        with pytest.raises(ValueError):
            create_change(project_root, name)


class TestListChanges:
    def test_empty_project(self, project_root: Path):
        assert list_changes(project_root) == []

    def test_sorted_by_creation(self, project_root: Path, make_change):
        make_change("second", created="2026-02-01T00:00:00+00:00")
        make_change("first", created="2026-01-01T00:00:00+00:00")
        assert [c.name for c in list_changes(project_root)] == ["first", "second"]

    def test_skips_archive_and_dirs_without_metadata(self, project_root: Path, make_change):
        make_change("real")
        make_change("bare", with_meta=False)
        paths.archive_dir(project_root).mkdir()
        assert [c.name for c in list_changes(project_root)] == ["real"]

    def test_skips_malformed_metadata(self, project_root: Path, make_change):
        change_dir = make_change("broken")
        (change_dir / paths.CHANGE_META_FILE).write_text("name: [unterminated\n")
        assert list_changes(project_root) == []

    def test_detects_artifacts_and_tasks(self, project_root: Path, make_change):
        make_change(
            "busy",
            {
                "intent.md": "# Intent",
                "tasks.md": "- [x] a\n- [ ] b\n",
                "coverage/auth.md": "",
            },
        )
        (change,) = list_changes(project_root)
        assert change.artifacts == ["intent.md", "tasks.md", "coverage/"]
        assert change.task_progress.completed == 1
        assert change.task_progress.total == 2

    def test_detect_artifacts_empty(self, tmp_path: Path):
        assert detect_artifacts(tmp_path) == []

    def test_list_archived(self, project_root: Path, make_change):
        make_change("old")
        paths.archive_dir(project_root).mkdir()
        paths.change_dir(project_root, "old").rename(
            paths.archive_dir(project_root) / "2026-01-02-old"
        )
        assert [c.name for c in list_archived(project_root)] == ["old"]
        assert list_changes(project_root) == []


class TestChangeStates:
    def test_missing_change(self, project_root: Path):
        with pytest.raises(NotFoundError):
            get_change(project_root, "ghost")

    def test_uses_change_schema(self, project_root: Path, make_change):
        make_change("c", {"intent.md": "# Intent"})
        states = get_change_states(project_root, "c")
        statuses = {s.artifact.id: s.status for s in states}
        assert statuses == {
            "intent": ArtifactStatus.DONE,
            "test-plan": ArtifactStatus.READY,
            "design": ArtifactStatus.READY,
            "tasks": ArtifactStatus.BLOCKED,
        }

"""Project layout: where changes, coverage and schemas live.

Layout::

    <project>/tdd/config.yaml
    <project>/tdd/changes/<name>/.tdd.yaml
    <project>/tdd/changes/archive/<date>-<name>/
    <project>/tdd/coverage/**/*.md
    <project>/tdd/schemas/<name>/schema.yaml
"""

from __future__ import annotations

from pathlib import Path

TDD_DIR = "tdd"
CHANGES_DIR = "changes"
COVERAGE_DIR = "coverage"
ARCHIVE_DIR = "archive"
SCHEMAS_DIR = "schemas"
TEMPLATES_DIR = "templates"
CONFIG_FILE = "config.yaml"
SCHEMA_FILE = "schema.yaml"
CHANGE_META_FILE = ".tdd.yaml"
TASKS_FILE = "tasks.md"
COVERAGE_SUFFIX = ".md"


def tdd_root(project_root: Path) -> Path:
    return Path(project_root) / TDD_DIR


def changes_dir(project_root: Path) -> Path:
    return tdd_root(project_root) / CHANGES_DIR


def coverage_dir(project_root: Path) -> Path:
    return tdd_root(project_root) / COVERAGE_DIR


def archive_dir(project_root: Path) -> Path:
    return changes_dir(project_root) / ARCHIVE_DIR


def schemas_dir(project_root: Path) -> Path:
    return tdd_root(project_root) / SCHEMAS_DIR


def config_path(project_root: Path) -> Path:
    return tdd_root(project_root) / CONFIG_FILE


def change_dir(project_root: Path, change_name: str) -> Path:
    return changes_dir(project_root) / change_name


def change_meta_path(project_root: Path, change_name: str) -> Path:
    return change_dir(project_root, change_name) / CHANGE_META_FILE


def find_project_root(start: Path | None = None) -> Path:
    """Walk upward to the first directory containing ``tdd/``.

    Falls back to ``start`` (default: cwd) when no ancestor has one.
    """
    start = (Path(start) if start is not None else Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / TDD_DIR).is_dir():
            return candidate
    return start

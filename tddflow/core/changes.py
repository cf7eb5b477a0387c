"""Change lifecycle: creation, discovery, task progress and status."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import yaml
from pydantic import ValidationError

from tddflow.core import paths
from tddflow.core.artifact_graph import ArtifactGraph
from tddflow.core.errors import NotFoundError
from tddflow.core.project import load_project_config, load_schema, read_yaml, write_yaml
from tddflow.models.config import ChangeMeta
from tddflow.models.reports import ChangeInfo, TaskProgress
from tddflow.models.schema import ArtifactState, SchemaDefinition

logger = logging.getLogger(__name__)

KNOWN_ARTIFACT_FILES = ("intent.md", "test-plan.md", "design.md", "tasks.md")

_CHECKBOX_RE = re.compile(r"^[ \t]*- \[([ xX])\]", re.MULTILINE)


# ---------------------------------------------------------------------------
# Task checklists
# ---------------------------------------------------------------------------


def parse_task_progress(text: str) -> TaskProgress | None:
    """Count ``- [ ]`` / ``- [x]`` checklist lines; ``None`` if there are none."""
    marks = _CHECKBOX_RE.findall(text)
    if not marks:
        return None
    completed = sum(1 for mark in marks if mark != " ")
    return TaskProgress(total=len(marks), completed=completed)


def count_incomplete_tasks(text: str) -> int:
    progress = parse_task_progress(text)
    return progress.incomplete if progress else 0


def read_task_progress(change_dir: Path) -> TaskProgress | None:
    tasks_path = Path(change_dir) / paths.TASKS_FILE
    if not tasks_path.is_file():
        return None
    return parse_task_progress(tasks_path.read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# Metadata
# ---------------------------------------------------------------------------


def load_change_meta(meta_path: Path) -> ChangeMeta | None:
    """Parse ``.tdd.yaml``; unreadable metadata is logged and yields ``None``."""
    try:
        return ChangeMeta.model_validate(read_yaml(meta_path))
    except (yaml.YAMLError, ValidationError) as exc:
        logger.warning("Skipping change with invalid metadata %s: %s", meta_path, exc)
        return None


def create_change(
    project_root: Path,
    name: str,
    schema_name: str | None = None,
    *,
    now: datetime | None = None,
) -> ChangeMeta:
    """Create ``tdd/changes/<name>/`` with its ``.tdd.yaml``.

    The schema defaults to the project config's schema and must resolve.

    Raises
    ------
    ValueError
        If the name is empty, contains a path separator or is reserved.
    FileExistsError
        If the change already exists.
    NotFoundError
        If the schema cannot be resolved.
    """
    if not name or "/" in name or "\\" in name or name in (".", "..", paths.ARCHIVE_DIR):
        raise ValueError(f"Invalid change name: {name!r}")

    schema_name = schema_name or load_project_config(project_root).schema_name
    load_schema(project_root, schema_name)

    change_dir = paths.change_dir(project_root, name)
    if change_dir.exists():
        raise FileExistsError(f'Change "{name}" already exists')

    created = (now or datetime.now(timezone.utc)).isoformat()
    meta = ChangeMeta(schema_name=schema_name, created=created, name=name)
    change_dir.mkdir(parents=True)
    write_yaml(change_dir / paths.CHANGE_META_FILE, meta.model_dump(by_alias=True))
    logger.info("Created change %s (schema %s)", name, schema_name)
    return meta


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def detect_artifacts(change_dir: Path) -> list[str]:
    change_dir = Path(change_dir)
    found = [f for f in KNOWN_ARTIFACT_FILES if (change_dir / f).exists()]
    if (change_dir / paths.COVERAGE_DIR).is_dir():
        found.append(f"{paths.COVERAGE_DIR}/")
    return found


def _read_change(change_dir: Path) -> ChangeInfo | None:
    meta_path = change_dir / paths.CHANGE_META_FILE
    if not change_dir.is_dir() or not meta_path.is_file():
        return None
    meta = load_change_meta(meta_path)
    if meta is None:
        return None
    return ChangeInfo(
        name=meta.name,
        schema_name=meta.schema_name,
        created=meta.created,
        path=change_dir,
        artifacts=detect_artifacts(change_dir),
        task_progress=read_task_progress(change_dir),
    )


def _scan(directory: Path, skip: tuple[str, ...] = ()) -> list[ChangeInfo]:
    if not directory.is_dir():
        return []
    changes = []
    for entry in sorted(directory.iterdir()):
        if entry.name in skip:
            continue
        info = _read_change(entry)
        if info is not None:
            changes.append(info)
    return changes


def list_changes(project_root: Path) -> list[ChangeInfo]:
    """Active changes, oldest first."""
    changes = _scan(paths.changes_dir(project_root), skip=(paths.ARCHIVE_DIR,))
    return sorted(changes, key=lambda c: c.created)


def list_archived(project_root: Path) -> list[ChangeInfo]:
    """Archived changes in directory (date-prefixed) order."""
    return _scan(paths.archive_dir(project_root))


def get_change(project_root: Path, name: str) -> ChangeInfo:
    info = _read_change(paths.change_dir(project_root, name))
    if info is None:
        raise NotFoundError(f'Change "{name}" not found')
    return info


def get_change_states(
    project_root: Path, name: str, schema: SchemaDefinition | None = None
) -> list[ArtifactState]:
    """Artifact states of a change, using its own schema by default.

    Raises ``CyclicDependencyError`` if the schema's graph has a cycle.
    """
    change = get_change(project_root, name)
    schema = schema or load_schema(project_root, change.schema_name)
    return ArtifactGraph(schema).states_for(change.path)

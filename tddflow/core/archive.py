"""Archive a change: warn on open tasks, sync coverage, move the directory.

Steps run in order and are not rolled back. The final rename is the only
step relied on for atomicity; if it fails, coverage already synced stays
synced and the error propagates unchanged.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from pathlib import Path

from tddflow.core import paths
from tddflow.core.changes import count_incomplete_tasks
from tddflow.core.coverage_sync import sync_coverage
from tddflow.core.errors import NotFoundError
from tddflow.models.reports import ArchiveResult

logger = logging.getLogger(__name__)


def archive_destination(archive_dir: Path, change_name: str, on_date: date) -> Path:
    return Path(archive_dir) / f"{on_date.isoformat()}-{change_name}"


def archive_change(
    change_dir: Path,
    sync_coverage_docs: bool = True,
    *,
    main_coverage_dir: Path | None = None,
    archive_dir: Path | None = None,
    on_date: date | None = None,
) -> ArchiveResult:
    """Archive the change at ``change_dir``.

    Parameters
    ----------
    change_dir:
        ``<project>/tdd/changes/<name>``.
    sync_coverage_docs:
        Merge ``<change>/coverage/`` into the main coverage tree first.
    main_coverage_dir:
        Defaults to ``<project>/tdd/coverage``.
    archive_dir:
        Defaults to ``<project>/tdd/changes/archive``.
    on_date:
        Date used in the destination name; defaults to today (UTC).

    Raises
    ------
    NotFoundError
        If the change directory does not exist. Nothing is modified.
    FileExistsError
        If the archive destination already exists. Nothing is modified.
    """
    change_dir = Path(change_dir)
    if not change_dir.is_dir():
        raise NotFoundError(f'Change "{change_dir.name}" not found')

    changes_root = change_dir.parent
    archive_dir = Path(archive_dir) if archive_dir else changes_root / paths.ARCHIVE_DIR
    main_coverage_dir = (
        Path(main_coverage_dir)
        if main_coverage_dir
        else changes_root.parent / paths.COVERAGE_DIR
    )
    on_date = on_date or datetime.now(timezone.utc).date()
    destination = archive_destination(archive_dir, change_dir.name, on_date)
    if destination.exists():
        raise FileExistsError(f"Archive destination already exists: {destination}")

    warnings: list[str] = []
    tasks_path = change_dir / paths.TASKS_FILE
    if tasks_path.is_file():
        incomplete = count_incomplete_tasks(tasks_path.read_text(encoding="utf-8"))
        if incomplete > 0:
            warnings.append(f"{incomplete} task(s) incomplete in {paths.TASKS_FILE}")

    synced: list[Path] = []
    if sync_coverage_docs:
        synced = sync_coverage(change_dir / paths.COVERAGE_DIR, main_coverage_dir)

    archive_dir.mkdir(parents=True, exist_ok=True)
    change_dir.rename(destination)
    logger.info("Archived %s to %s", change_dir.name, destination)

    return ArchiveResult(
        archive_path=destination.resolve(),
        synced_coverage=synced,
        warnings=warnings,
    )


def archive_by_name(
    project_root: Path, change_name: str, sync_coverage_docs: bool = True
) -> ArchiveResult:
    """Archive ``tdd/changes/<change_name>`` within a project."""
    return archive_change(
        paths.change_dir(project_root, change_name),
        sync_coverage_docs,
        main_coverage_dir=paths.coverage_dir(project_root),
        archive_dir=paths.archive_dir(project_root),
    )

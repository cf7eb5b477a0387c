"""Mirror a change's delta coverage tree onto the main coverage tree.

Planning is pure: ``plan_sync`` takes in-memory ``{relative path: text}``
mappings and returns the writes to perform. ``sync_coverage`` reads the
trees, plans, and applies the writes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from tddflow.core.coverage import merge_delta
from tddflow.core.paths import COVERAGE_SUFFIX
from tddflow.models.coverage import PlannedWrite

logger = logging.getLogger(__name__)


def plan_sync(
    delta_files: Mapping[str, str], main_files: Mapping[str, str]
) -> list[PlannedWrite]:
    """Plan one write per delta coverage document, in path order.

    ``main_files`` holds the existing main documents by the same relative
    paths; a delta without a counterpart seeds a fresh document.
    """
    writes = []
    for relative_path in sorted(delta_files):
        if not relative_path.endswith(COVERAGE_SUFFIX):
            continue
        existing = main_files.get(relative_path)
        writes.append(
            PlannedWrite(
                relative_path=relative_path,
                content=merge_delta(existing, delta_files[relative_path]),
                seeded=existing is None,
            )
        )
    return writes


def collect_coverage_files(root: Path) -> dict[str, str]:
    """Read every regular coverage document under ``root``, recursively."""
    root = Path(root)
    if not root.is_dir():
        return {}
    files = {}
    for path in sorted(root.rglob(f"*{COVERAGE_SUFFIX}")):
        if path.is_file():
            relative = PurePosixPath(*path.relative_to(root).parts)
            files[str(relative)] = path.read_text(encoding="utf-8")
    return files


def read_existing(root: Path, relative_paths: list[str]) -> dict[str, str]:
    """Read the main documents that exist for the given relative paths."""
    existing = {}
    for relative_path in relative_paths:
        path = Path(root) / relative_path
        if path.is_file():
            existing[relative_path] = path.read_text(encoding="utf-8")
    return existing


def apply_writes(main_root: Path, writes: list[PlannedWrite]) -> list[Path]:
    """Write planned documents, creating directories on demand.

    Returns the absolute destination paths in write order.
    """
    main_root = Path(main_root)
    written = []
    for write in writes:
        destination = (main_root / write.relative_path).resolve()
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(write.content, encoding="utf-8")
        logger.debug(
            "%s coverage document %s",
            "Seeded" if write.seeded else "Merged",
            destination,
        )
        written.append(destination)
    return written


def sync_coverage(delta_root: Path, main_root: Path) -> list[Path]:
    """Merge every delta coverage document into the main coverage tree.

    Returns the absolute paths touched. A missing ``delta_root`` is a no-op.
    """
    delta_files = collect_coverage_files(delta_root)
    if not delta_files:
        return []
    main_files = read_existing(main_root, list(delta_files))
    written = apply_writes(main_root, plan_sync(delta_files, main_files))
    logger.info("Synced %d coverage document(s) into %s", len(written), main_root)
    return written

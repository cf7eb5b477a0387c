"""Project configuration, schema resolution and project initialisation.

Schemas resolve from the project first (``tdd/schemas/<name>/``) and then
from the built-in schemas shipped with the package.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Any

import yaml

from tddflow.core import paths
from tddflow.core.errors import NotFoundError
from tddflow.models.config import DEFAULT_SCHEMA, ProjectConfig
from tddflow.models.reports import InitResult
from tddflow.models.schema import SchemaDefinition

logger = logging.getLogger(__name__)

BUILTIN_SCHEMAS_DIR = Path(__file__).resolve().parent.parent / "schemas"


def read_yaml(path: Path) -> Any:
    return yaml.safe_load(Path(path).read_text(encoding="utf-8"))


def write_yaml(path: Path, data: Any) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


# ---------------------------------------------------------------------------
# Project config
# ---------------------------------------------------------------------------


def load_project_config(project_root: Path) -> ProjectConfig:
    """Load ``tdd/config.yaml``, or defaults when it does not exist."""
    config_path = paths.config_path(project_root)
    if not config_path.exists():
        return ProjectConfig()
    return ProjectConfig.model_validate(read_yaml(config_path) or {})


def save_project_config(project_root: Path, config: ProjectConfig) -> None:
    write_yaml(
        paths.config_path(project_root),
        config.model_dump(by_alias=True, exclude_none=True),
    )


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


def resolve_schema_path(project_root: Path, schema_name: str) -> Path | None:
    """Locate ``schema.yaml`` for a schema, project copy first."""
    for base in (paths.schemas_dir(project_root), BUILTIN_SCHEMAS_DIR):
        candidate = base / schema_name / paths.SCHEMA_FILE
        if candidate.is_file():
            return candidate
    return None


def is_builtin(schema_path: Path) -> bool:
    return BUILTIN_SCHEMAS_DIR in Path(schema_path).resolve().parents


def load_schema(project_root: Path, schema_name: str) -> SchemaDefinition:
    """Load and parse a schema definition.

    Raises
    ------
    NotFoundError
        If neither the project nor the built-ins define the schema.
    """
    schema_path = resolve_schema_path(project_root, schema_name)
    if schema_path is None:
        raise NotFoundError(f'Schema "{schema_name}" not found')
    return SchemaDefinition.model_validate(read_yaml(schema_path))


def load_schema_template(
    project_root: Path, schema_name: str, template_name: str
) -> str | None:
    """Read a per-artifact template, project copy first."""
    for base in (paths.schemas_dir(project_root), BUILTIN_SCHEMAS_DIR):
        candidate = base / schema_name / paths.TEMPLATES_DIR / template_name
        if candidate.is_file():
            return candidate.read_text(encoding="utf-8")
    return None


def list_schemas(project_root: Path) -> list[tuple[str, str]]:
    """``(name, source)`` pairs, source being ``project`` or ``built-in``.

    A project schema shadows a built-in schema of the same name.
    """
    found: dict[str, str] = {}
    for base, source in (
        (BUILTIN_SCHEMAS_DIR, "built-in"),
        (paths.schemas_dir(project_root), "project"),
    ):
        if not base.is_dir():
            continue
        for entry in sorted(base.iterdir()):
            if (entry / paths.SCHEMA_FILE).is_file():
                found[entry.name] = source
    return sorted(found.items())


def init_schema(
    project_root: Path,
    schema_name: str,
    artifact_ids: list[str] | None = None,
    description: str | None = None,
) -> Path:
    """Create a linear custom schema with placeholder templates.

    Each artifact requires the one before it. Returns the schema directory.
    """
    schema_dir = paths.schemas_dir(project_root) / schema_name
    if schema_dir.exists():
        raise FileExistsError(f'Schema "{schema_name}" already exists')

    ids = artifact_ids or ["intent", "test-plan", "tasks"]
    artifacts = [
        {
            "id": artifact_id,
            "generates": f"{artifact_id}.md",
            "description": f"{artifact_id} artifact",
            "template": f"{artifact_id}.md",
            "requires": [ids[i - 1]] if i > 0 else [],
        }
        for i, artifact_id in enumerate(ids)
    ]
    definition = {
        "name": schema_name,
        "version": 1,
        "description": description or f"Custom schema: {schema_name}",
        "artifacts": artifacts,
        "apply": {"requires": [ids[-1]], "tracks": paths.TASKS_FILE},
    }
    write_yaml(schema_dir / paths.SCHEMA_FILE, definition)

    templates_dir = schema_dir / paths.TEMPLATES_DIR
    templates_dir.mkdir(parents=True, exist_ok=True)
    for artifact_id in ids:
        (templates_dir / f"{artifact_id}.md").write_text(
            f"# {artifact_id}\n\n<!-- Template for {artifact_id} artifact -->\n",
            encoding="utf-8",
        )
    logger.info("Created schema %s at %s", schema_name, schema_dir)
    return schema_dir


def fork_schema(project_root: Path, source_name: str, schema_name: str) -> Path:
    """Copy an existing schema directory into the project under a new name."""
    source_path = resolve_schema_path(project_root, source_name)
    if source_path is None:
        raise NotFoundError(f'Source schema "{source_name}" not found')

    target_dir = paths.schemas_dir(project_root) / schema_name
    if target_dir.exists():
        raise FileExistsError(f'Schema "{schema_name}" already exists')

    shutil.copytree(source_path.parent, target_dir)
    definition = read_yaml(target_dir / paths.SCHEMA_FILE)
    definition["name"] = schema_name
    write_yaml(target_dir / paths.SCHEMA_FILE, definition)
    logger.info("Forked schema %s -> %s", source_name, schema_name)
    return target_dir


# ---------------------------------------------------------------------------
# Project init
# ---------------------------------------------------------------------------


def init_project(project_root: Path, schema_name: str = DEFAULT_SCHEMA) -> InitResult:
    """Create the ``tdd/`` tree and a default ``config.yaml``.

    Safe to re-run: an existing config is never overwritten.
    """
    root = paths.tdd_root(project_root)
    already_exists = root.exists()
    created: list[Path] = []

    for directory in (
        root,
        paths.changes_dir(project_root),
        paths.coverage_dir(project_root),
    ):
        directory.mkdir(parents=True, exist_ok=True)
        created.append(directory)

    config_path = paths.config_path(project_root)
    if not config_path.exists():
        save_project_config(project_root, ProjectConfig(schema_name=schema_name))
        created.append(config_path)

    return InitResult(created=created, already_exists=already_exists)

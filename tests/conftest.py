"""Shared test fixtures for tddflow."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from tddflow.core import paths
from tddflow.core.project import init_project, write_yaml
from tddflow.models.schema import Artifact, SchemaDefinition


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Provide an initialised project with tdd/changes and tdd/coverage."""
    root = tmp_path / "project"
    root.mkdir()
    init_project(root)
    return root


@pytest.fixture
def make_change(project_root: Path) -> Callable[..., Path]:
    """Factory fixture: create a change directory with metadata and files."""

    def _factory(
        name: str = "test-change",
        files: dict[str, str] | None = None,
        schema: str = "test-driven",
        created: str = "2026-01-01T00:00:00+00:00",
        with_meta: bool = True,
    ) -> Path:
        change_dir = paths.change_dir(project_root, name)
        change_dir.mkdir(parents=True, exist_ok=True)
        if with_meta:
            write_yaml(
                change_dir / paths.CHANGE_META_FILE,
                {"schema": schema, "created": created, "name": name},
            )
        for relative, content in (files or {}).items():
            target = change_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return change_dir

    return _factory


@pytest.fixture
def make_schema() -> Callable[..., SchemaDefinition]:
    """Factory fixture: build a schema from ``{id: [requires...]}``."""

    def _factory(graph: dict[str, list[str]], name: str = "custom") -> SchemaDefinition:
        return SchemaDefinition(
            name=name,
            artifacts=[
                Artifact(id=artifact_id, generates=f"{artifact_id}.md", requires=requires)
                for artifact_id, requires in graph.items()
            ],
        )

    return _factory


@pytest.fixture
def tdd_schema(make_schema: Callable[..., SchemaDefinition]) -> SchemaDefinition:
    """The four-artifact intent -> (test-plan, design) -> tasks pipeline."""
    return make_schema(
        {
            "intent": [],
            "test-plan": ["intent"],
            "design": ["intent"],
            "tasks": ["test-plan", "design"],
        },
        name="test-driven",
    )

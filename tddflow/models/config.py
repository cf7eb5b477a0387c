"""Project and change metadata models (``config.yaml`` / ``.tdd.yaml``)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SCHEMA = "test-driven"


class ProjectConfig(BaseModel):
    """Project-level configuration, loaded from ``tdd/config.yaml``.

    The YAML key ``schema`` is exposed as ``schema_name``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_name: str = Field(DEFAULT_SCHEMA, alias="schema")
    context: str | None = None
    rules: dict[str, list[str]] | None = None


class ChangeMeta(BaseModel):
    """Per-change metadata, stored in ``.tdd.yaml`` inside the change."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_name: str = Field(alias="schema")
    created: str  # ISO-8601 timestamp
    name: str

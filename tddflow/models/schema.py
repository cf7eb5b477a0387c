"""Schema models: the declarative artifact pipeline of a change."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Artifact(BaseModel):
    """A single deliverable document in a change's pipeline.

    ``generates`` is a path relative to the change directory. A pattern
    containing ``*`` is satisfied by the existence of the directory
    prefix before the wildcard.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    generates: str
    description: str = ""
    template: str | None = None
    instruction: str | None = None
    requires: list[str] = []  # artifact ids that must be done first


class ApplyConfig(BaseModel):
    """Which artifacts gate implementation and which file tracks it."""

    model_config = ConfigDict(frozen=True)

    requires: list[str]
    tracks: str
    instruction: str | None = None


class SchemaDefinition(BaseModel):
    """A named, versioned, ordered list of artifacts.

    The ``requires`` relation must be acyclic and reference only ids
    declared in the same schema; see ``validate_schema``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: int = 1
    description: str | None = None
    artifacts: list[Artifact]
    apply: ApplyConfig | None = None

    @property
    def artifact_ids(self) -> list[str]:
        """Artifact ids in schema order."""
        return [a.id for a in self.artifacts]

    def get_artifact(self, artifact_id: str) -> Artifact | None:
        for artifact in self.artifacts:
            if artifact.id == artifact_id:
                return artifact
        return None


class ArtifactStatus(str, Enum):
    """Derived status of an artifact within a change."""

    DONE = "done"
    READY = "ready"
    BLOCKED = "blocked"


class ArtifactState(BaseModel):
    """Status of one artifact, computed fresh from the filesystem."""

    model_config = ConfigDict(frozen=True)

    artifact: Artifact
    status: ArtifactStatus
    blocked_by: list[str] = []  # unmet requirements, in ``requires`` order

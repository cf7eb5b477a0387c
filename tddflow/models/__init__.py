"""tddflow data models: all Pydantic v2, all frozen (immutable)."""

from tddflow.models.config import ChangeMeta, ProjectConfig
from tddflow.models.coverage import (
    CoverageDocument,
    DeltaDocument,
    MarkdownSection,
    PlannedWrite,
    TestBlock,
)
from tddflow.models.reports import (
    ArchiveResult,
    ChangeInfo,
    InitResult,
    Severity,
    TaskProgress,
    ValidationIssue,
    ValidationResult,
)
from tddflow.models.schema import (
    ApplyConfig,
    Artifact,
    ArtifactState,
    ArtifactStatus,
    SchemaDefinition,
)

__all__ = [
    # schema
    "Artifact",
    "ApplyConfig",
    "SchemaDefinition",
    "ArtifactStatus",
    "ArtifactState",
    # config
    "ProjectConfig",
    "ChangeMeta",
    # coverage
    "MarkdownSection",
    "TestBlock",
    "CoverageDocument",
    "DeltaDocument",
    "PlannedWrite",
    # reports
    "Severity",
    "ValidationIssue",
    "ValidationResult",
    "ArchiveResult",
    "TaskProgress",
    "ChangeInfo",
    "InitResult",
]

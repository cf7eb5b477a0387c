"""Validation, listing and archive result models."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict


class Severity(str, Enum):
    """Only ERROR makes a validation result invalid."""

    ERROR = "error"
    WARNING = "warning"
    SUGGESTION = "suggestion"


class ValidationIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    file: str | None = None
    line: int | None = None


class ValidationResult(BaseModel):
    """Outcome of validating a change or a schema."""

    model_config = ConfigDict(frozen=True)

    issues: list[ValidationIssue] = []

    @property
    def valid(self) -> bool:
        return not any(i.severity == Severity.ERROR for i in self.issues)

    def by_severity(self, severity: Severity) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]


class ArchiveResult(BaseModel):
    """Returned once per archive operation; never persisted."""

    model_config = ConfigDict(frozen=True)

    archive_path: Path
    synced_coverage: list[Path] = []
    warnings: list[str] = []


class TaskProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    completed: int

    @property
    def incomplete(self) -> int:
        return self.total - self.completed


class ChangeInfo(BaseModel):
    """Summary of a change directory, for listing and dashboards."""

    model_config = ConfigDict(frozen=True)

    name: str
    schema_name: str
    created: str
    path: Path
    artifacts: list[str] = []
    task_progress: TaskProgress | None = None


class InitResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    created: list[Path] = []
    already_exists: bool = False

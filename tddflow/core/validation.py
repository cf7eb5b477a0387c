"""Structural validation of a change's artifact documents.

Only ERROR issues make a change invalid; warnings and suggestions are
advisory.
"""

from __future__ import annotations

import re
from pathlib import Path

from tddflow.core import paths
from tddflow.core.changes import parse_task_progress
from tddflow.core.coverage import parse_coverage
from tddflow.models.reports import Severity, ValidationIssue, ValidationResult

INTENT_SECTIONS = ("## Why", "## What Changes")

_PHASE_RES = {
    "RED": (re.compile(r"^## \d+\.\s*RED", re.IGNORECASE | re.MULTILINE), Severity.WARNING),
    "GREEN": (re.compile(r"^## \d+\.\s*GREEN", re.IGNORECASE | re.MULTILINE), Severity.WARNING),
    "REFACTOR": (
        re.compile(r"^## \d+\.\s*REFACTOR", re.IGNORECASE | re.MULTILINE),
        Severity.SUGGESTION,
    ),
}

# clause marker -> severity when a scenario lacks it
_CLAUSES = {
    "GIVEN": Severity.SUGGESTION,
    "WHEN": Severity.SUGGESTION,
    "THEN": Severity.WARNING,
}


def _issue(severity: Severity, message: str, file: Path | None = None) -> ValidationIssue:
    return ValidationIssue(
        severity=severity, message=message, file=str(file) if file else None
    )


def validate_intent(change_dir: Path) -> list[ValidationIssue]:
    intent_path = change_dir / "intent.md"
    if not intent_path.is_file():
        return [_issue(Severity.WARNING, "Missing intent.md", intent_path)]

    content = intent_path.read_text(encoding="utf-8")
    return [
        _issue(Severity.WARNING, f'intent.md missing "{section}" section', intent_path)
        for section in INTENT_SECTIONS
        if section not in content
    ]


def validate_test_plan(change_dir: Path) -> list[ValidationIssue]:
    plan_path = change_dir / "test-plan.md"
    if not plan_path.is_file():
        return [_issue(Severity.WARNING, "Missing test-plan.md", plan_path)]

    document = parse_coverage(plan_path.read_text(encoding="utf-8"))
    if not document.blocks:
        return [
            _issue(
                Severity.WARNING,
                "test-plan.md has no test scenarios (### Test: blocks)",
                plan_path,
            )
        ]

    issues = []
    for clause, severity in _CLAUSES.items():
        missing = [b.name for b in document.blocks if f"- {clause}" not in b.content]
        if missing:
            verb = "are" if severity == Severity.WARNING else "may be"
            issues.append(
                _issue(
                    severity,
                    f"Some test scenarios {verb} missing {clause} clauses: "
                    + ", ".join(missing),
                    plan_path,
                )
            )
    return issues


def validate_tasks(change_dir: Path) -> list[ValidationIssue]:
    tasks_path = change_dir / paths.TASKS_FILE
    if not tasks_path.is_file():
        return []

    content = tasks_path.read_text(encoding="utf-8")
    issues = [
        _issue(severity, f"tasks.md missing {phase} phase section", tasks_path)
        for phase, (pattern, severity) in _PHASE_RES.items()
        if not pattern.search(content)
    ]
    if parse_task_progress(content) is None:
        issues.append(
            _issue(
                Severity.WARNING,
                "tasks.md has no checkbox tasks (- [ ] or - [x])",
                tasks_path,
            )
        )
    return issues


def validate_change(project_root: Path, change_name: str) -> ValidationResult:
    """Validate the artifacts of ``tdd/changes/<change_name>``."""
    change_dir = paths.change_dir(project_root, change_name)
    if not change_dir.is_dir():
        return ValidationResult(
            issues=[_issue(Severity.ERROR, f'Change "{change_name}" not found')]
        )

    issues: list[ValidationIssue] = []
    meta_path = change_dir / paths.CHANGE_META_FILE
    if not meta_path.is_file():
        issues.append(_issue(Severity.ERROR, "Missing .tdd.yaml metadata file", meta_path))

    issues.extend(validate_intent(change_dir))
    issues.extend(validate_test_plan(change_dir))
    issues.extend(validate_tasks(change_dir))
    return ValidationResult(issues=issues)

"""Artifact dependency graph: readiness evaluation and schema validation.

Status rules, evaluated in schema order:
- DONE when the artifact's generated file exists (a wildcard pattern is
  satisfied by its directory prefix existing, even if empty).
- READY when not done and every ``requires`` entry is done.
- BLOCKED otherwise, with ``blocked_by`` listing the unmet entries in
  ``requires`` order.

State is never cached: it is recomputed from the change directory on
every call.
"""

from __future__ import annotations

import logging
from enum import Enum
from itertools import takewhile
from pathlib import Path, PurePosixPath

from tddflow.models.reports import Severity, ValidationIssue
from tddflow.models.schema import (
    Artifact,
    ArtifactState,
    ArtifactStatus,
    SchemaDefinition,
)

logger = logging.getLogger(__name__)


class CyclicDependencyError(ValueError):
    """Raised when the artifact requires-graph contains a cycle."""


class _Mark(Enum):
    UNVISITED = 0
    IN_PROGRESS = 1
    FINISHED = 2


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def evaluate(existing: set[str], schema: SchemaDefinition) -> list[ArtifactState]:
    """Compute the state of every artifact, in schema order.

    ``existing`` is the set of artifact ids whose generated files exist.
    """
    done = {a.id for a in schema.artifacts if a.id in existing}
    states = []
    for artifact in schema.artifacts:
        if artifact.id in done:
            states.append(ArtifactState(artifact=artifact, status=ArtifactStatus.DONE))
            continue
        blocked_by = [dep for dep in artifact.requires if dep not in done]
        status = ArtifactStatus.BLOCKED if blocked_by else ArtifactStatus.READY
        states.append(
            ArtifactState(artifact=artifact, status=status, blocked_by=blocked_by)
        )
    return states


def first_ready(states: list[ArtifactState]) -> Artifact | None:
    for state in states:
        if state.status == ArtifactStatus.READY:
            return state.artifact
    return None


def all_ready(states: list[ArtifactState]) -> list[Artifact]:
    return [s.artifact for s in states if s.status == ArtifactStatus.READY]


def all_done(states: list[ArtifactState]) -> bool:
    return all(s.status == ArtifactStatus.DONE for s in states)


# ---------------------------------------------------------------------------
# Filesystem probe
# ---------------------------------------------------------------------------


def artifact_exists(change_dir: Path, artifact: Artifact) -> bool:
    """Whether ``artifact.generates`` exists inside ``change_dir``.

    For a wildcard pattern such as ``specs/**/*.md`` or ``specs/auth-*.md``
    only the directory before the first wildcard segment (``specs``) must
    exist.
    """
    pattern = artifact.generates
    if "*" in pattern:
        prefix = takewhile(lambda part: "*" not in part, PurePosixPath(pattern).parts)
        return Path(change_dir).joinpath(*prefix).is_dir()
    return (Path(change_dir) / pattern).exists()


def detect_existing(change_dir: Path, schema: SchemaDefinition) -> set[str]:
    return {a.id for a in schema.artifacts if artifact_exists(change_dir, a)}


def get_artifact_states(
    change_dir: Path, schema: SchemaDefinition
) -> list[ArtifactState]:
    """Evaluate a change directory against a schema."""
    existing = detect_existing(change_dir, schema)
    logger.debug("Artifacts present in %s: %s", change_dir, sorted(existing))
    return evaluate(existing, schema)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def find_cycles(schema: SchemaDefinition) -> list[list[str]]:
    """Return every cycle reached by depth-first search over ``requires``.

    Each cycle is the path from the re-entered node back to itself, e.g.
    ``["a", "b", "a"]``. The search covers every artifact, so disconnected
    parts of the graph are checked too. Unknown ids are skipped here;
    ``validate_schema`` reports them separately.
    """
    graph = {a.id: list(a.requires) for a in schema.artifacts}
    marks = {node: _Mark.UNVISITED for node in graph}
    cycles: list[list[str]] = []
    stack: list[str] = []

    def visit(node: str) -> None:
        marks[node] = _Mark.IN_PROGRESS
        stack.append(node)
        for dep in graph[node]:
            if dep not in graph:
                continue
            if marks[dep] == _Mark.IN_PROGRESS:
                cycles.append(stack[stack.index(dep):] + [dep])
            elif marks[dep] == _Mark.UNVISITED:
                visit(dep)
        stack.pop()
        marks[node] = _Mark.FINISHED

    for node in graph:
        if marks[node] == _Mark.UNVISITED:
            visit(node)
    return cycles


def validate_schema(schema: SchemaDefinition) -> list[ValidationIssue]:
    """Check that requirements resolve and the graph is acyclic.

    Returns a list of ERROR issues; an empty list means the schema is valid.
    """
    issues: list[ValidationIssue] = []
    ids = set(schema.artifact_ids)

    seen: set[str] = set()
    for artifact in schema.artifacts:
        if artifact.id in seen:
            issues.append(
                ValidationIssue(
                    severity=Severity.ERROR,
                    message=f'Artifact id "{artifact.id}" is declared more than once',
                )
            )
        seen.add(artifact.id)
        for dep in artifact.requires:
            if dep not in ids:
                issues.append(
                    ValidationIssue(
                        severity=Severity.ERROR,
                        message=f'Artifact "{artifact.id}" requires unknown "{dep}"',
                    )
                )

    for cycle in find_cycles(schema):
        issues.append(
            ValidationIssue(
                severity=Severity.ERROR,
                message=f"Schema has circular dependencies: {' -> '.join(cycle)}",
            )
        )
    return issues


class ArtifactGraph:
    """A schema whose requires-graph is known to be acyclic.

    Refuses to build over a cycle, so evaluation results from it can be
    trusted.

    Parameters
    ----------
    schema:
        The schema definition to wrap.
    """

    def __init__(self, schema: SchemaDefinition) -> None:
        cycles = find_cycles(schema)
        if cycles:
            raise CyclicDependencyError(
                f"Schema {schema.name!r} has a cycle: {' -> '.join(cycles[0])}"
            )
        self.schema = schema
        self._dependents: dict[str, list[str]] = {a.id: [] for a in schema.artifacts}
        for artifact in schema.artifacts:
            for dep in artifact.requires:
                if dep in self._dependents:
                    self._dependents[dep].append(artifact.id)

    def get_dependents(self, artifact_id: str) -> list[str]:
        """Direct dependents of an artifact, in schema order."""
        return list(self._dependents.get(artifact_id, []))

    def evaluate(self, existing: set[str]) -> list[ArtifactState]:
        return evaluate(existing, self.schema)

    def states_for(self, change_dir: Path) -> list[ArtifactState]:
        return get_artifact_states(change_dir, self.schema)

"""tddflow: test-driven change lifecycle for AI coding assistants.

Changes move through an artifact pipeline (intent -> test-plan/design ->
tasks) declared by a schema. When a change is archived its delta coverage
documents are merged into the project's main coverage record.
"""

__version__ = "0.1.0"
__description__ = "Test-driven development framework for AI coding assistants"

from tddflow.core.archive import archive_change
from tddflow.core.artifact_graph import evaluate, validate_schema
from tddflow.core.coverage import merge_delta
from tddflow.core.coverage_sync import sync_coverage

__all__ = [
    "archive_change",
    "evaluate",
    "merge_delta",
    "sync_coverage",
    "validate_schema",
    "__version__",
]

"""Error taxonomy shared by the core operations.

Filesystem failures are not wrapped: ``OSError`` propagates unchanged.
Structural problems are reported as ``ValidationIssue`` values, not raised.
"""

from __future__ import annotations


class TddError(Exception):
    """Base class for tddflow errors."""


class NotFoundError(TddError, FileNotFoundError):
    """Raised when a referenced change, schema or artifact is absent.

    Always fatal to the calling operation; never retried.
    """

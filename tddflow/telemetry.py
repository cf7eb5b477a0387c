"""Anonymous command usage reporting.

Only the command name and tool version are ever recorded, never
arguments, paths or file contents. Events are logged at debug level;
there is no network transport.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def track_command(command: str, version: str, *, enabled: bool) -> bool:
    """Record one command invocation if telemetry is enabled.

    Returns whether an event was recorded.
    """
    if not enabled:
        return False
    logger.debug("telemetry event: command=%s version=%s", command, version)
    return True

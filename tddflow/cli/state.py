"""Per-invocation CLI state, built once by the root callback."""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import BaseModel, ConfigDict

from tddflow.config import Settings


class CliState(BaseModel):
    model_config = ConfigDict(frozen=True)

    project_root: Path
    settings: Settings
    telemetry: bool


def get_state(ctx: typer.Context) -> CliState:
    state = ctx.find_root().obj
    if not isinstance(state, CliState):
        raise RuntimeError("CLI state not initialised")
    return state

"""tddflow CLI: Typer-based command-line interface.

Provides the ``tdd`` command with subcommands for initialising a project,
creating and inspecting changes, validating and archiving them, and
managing schemas.

All output uses Rich for formatted terminal display.
"""

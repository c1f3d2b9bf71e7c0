"""Subcommand modules for rulectl.

Provides register_commands() which uses deferred imports to keep
``rulectl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group."""
    # --- Groups ---
    from rulectl.commands.export import export
    from rulectl.commands.state import state
    from rulectl.commands.taxonomy import taxonomy

    cli.add_command(taxonomy)
    cli.add_command(state)
    cli.add_command(export)

    # --- Standalone commands ---
    from rulectl.commands.detect import detect
    from rulectl.commands.generate import generate

    cli.add_command(generate)
    cli.add_command(detect)

"""Command group: bulk export of rules content."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleGroup

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  rulectl export prepared --output build/preparedRules.json
  rulectl export markdown --output build/rules"""


@click.group(cls=RuleGroup, examples=_EXPORT_EXAMPLES)
@click.pass_obj
def export(app: AppContext) -> None:
    """Export rules for every library in the taxonomy."""


@export.command(
    examples="""\
  rulectl export prepared --output preparedRules.json"""
)
@click.option(
    "--output",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="JSON file to write.",
)
@click.pass_obj
def prepared(app: AppContext, output: Path) -> None:
    """Write every library's rules to one JSON file keyed by library id."""
    from rulectl.services.export import ExportService

    app.emit(ExportService(app.taxonomy).export_prepared_rules(output))


@export.command(
    examples="""\
  rulectl export markdown --output build/rules"""
)
@click.option(
    "--output",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for one markdown file per library.",
)
@click.pass_obj
def markdown(app: AppContext, output: Path) -> None:
    """Write one standalone rules file per library."""
    from rulectl.services.export import ExportService

    app.emit(ExportService(app.taxonomy).export_markdown(output))

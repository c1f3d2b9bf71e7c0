"""Command group: browse the technology taxonomy."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleGroup

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext

_TAXONOMY_EXAMPLES = """\
  rulectl taxonomy layers
  rulectl taxonomy layers --layer frontend
  rulectl taxonomy show react-query"""


@click.group(cls=RuleGroup, examples=_TAXONOMY_EXAMPLES)
@click.pass_obj
def taxonomy(app: AppContext) -> None:
    """Browse layers, stacks, and libraries."""


@taxonomy.command(
    examples="""\
  rulectl taxonomy layers
  rulectl --json taxonomy layers --layer backend"""
)
@click.option("--layer", default=None, help="Only show one layer.")
@click.pass_obj
def layers(app: AppContext, layer: str | None) -> None:
    """List the catalog as a layer → stack → library tree."""
    from rulectl.services.taxonomy import TaxonomyService

    app.emit(TaxonomyService(app.taxonomy).list_layers(layer=layer))


@taxonomy.command(
    examples="""\
  rulectl taxonomy show fastapi"""
)
@click.argument("library")
@click.pass_obj
def show(app: AppContext, library: str) -> None:
    """Show one library and its rules."""
    from rulectl.services.taxonomy import TaxonomyService

    app.emit(TaxonomyService(app.taxonomy).describe_library(library))

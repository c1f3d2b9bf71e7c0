"""Standalone command: generate rules documents for a selection."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleCommand, split_library_options

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext

_GENERATE_EXAMPLES = """\
  rulectl generate --select react-query --select zustand
  rulectl generate -s fastapi,pytest --strategy multi --output .cursor/rules
  rulectl generate --state "libraries=react-query,zustand" --name Acme
  rulectl generate --from-deps package.json --output rules/"""


@click.command(cls=RuleCommand, examples=_GENERATE_EXAMPLES)
@click.option(
    "-s",
    "--select",
    "selected",
    multiple=True,
    help="Library id to include (repeatable, or comma-separated).",
)
@click.option("--state", default=None, help="Encoded selection: value, query string, or URL.")
@click.option(
    "--from-deps",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Pre-select libraries found in a dependency file.",
)
@click.option(
    "--strategy",
    type=click.Choice(["single", "multi"], case_sensitive=False),
    default=None,
    help="One combined file or one file per library.",
)
@click.option("--name", default=None, help="Project name (overrides config).")
@click.option("--description", default=None, help="Project description (overrides config).")
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write documents to this directory (omit to print markdown).",
)
@click.pass_obj
def generate(
    app: AppContext,
    selected: tuple[str, ...],
    state: str | None,
    from_deps: Path | None,
    strategy: str | None,
    name: str | None,
    description: str | None,
    output: Path | None,
) -> None:
    """Generate AI rules for the selected libraries."""
    from rulectl.domain.selection import ProjectContext
    from rulectl.services.dependencies import DependencyService
    from rulectl.services.rules import RulesService
    from rulectl.services.state import StateService

    settings = app.settings
    libraries = split_library_options(selected)
    warnings: list[str] = []

    if state:
        decoded = StateService(app.taxonomy, param=settings.url.param).parse(state)
        libraries.extend(decoded.libraries)
        warnings.extend(f"Ignored unknown library: {token}" for token in decoded.unknown)

    if from_deps is not None:
        detected = DependencyService(app.taxonomy).detect(from_deps)
        if not detected.ok:
            app.emit(detected)
            return
        libraries.extend(detected.data["libraries"])

    project = ProjectContext(
        name=name if name is not None else settings.project.name,
        description=description if description is not None else settings.project.description,
    )
    result = RulesService(app.taxonomy, project_root=settings.project_root).generate(
        libraries,
        project=project,
        strategy=strategy or settings.rules.strategy,
        output_dir=output,
        warn_unresolved_placeholders=settings.rules.warn_unresolved_placeholders,
    )
    result = result.with_warnings(warnings)

    if not result.ok or output is not None or app.settings.json_output or app.settings.quiet:
        app.emit(result)
        return

    # Pipe-friendly: raw markdown to stdout
    documents = result.data["documents"]
    for index, document in enumerate(documents):
        if len(documents) > 1:
            if index:
                click.echo()
            click.echo(f"<!-- {document['fileName']} -->")
        click.echo(document["markdown"], nl=False)
    app.emit_warnings(result)

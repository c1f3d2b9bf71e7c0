"""Standalone command: detect libraries from a dependency file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleCommand

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext


@click.command(
    cls=RuleCommand,
    examples="""\
  rulectl detect package.json
  rulectl -q detect requirements.txt | xargs -I{} echo --select {}""",
)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
def detect(app: AppContext, path: Path) -> None:
    """Match packages in PATH against taxonomy libraries."""
    from rulectl.services.dependencies import DependencyService

    app.emit(DependencyService(app.taxonomy).detect(path))

"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands via
``@click.pass_obj``. Loads the taxonomy lazily and centralizes result
emission (stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from rulectl.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from rulectl.config.settings import RuleSettings
    from rulectl.domain.taxonomy import Taxonomy
    from rulectl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The taxonomy is loaded on first use so ``--help`` and ``--version``
    never read catalog data.
    """

    def __init__(self, settings: RuleSettings, *, taxonomy_path: str | None = None) -> None:
        self.settings = settings
        self._taxonomy_override = Path(taxonomy_path) if taxonomy_path else None
        self._taxonomy: Taxonomy | None = None

        from rulectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from rulectl.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def taxonomy(self) -> Taxonomy:
        """The taxonomy catalog (loaded lazily on first access).

        A missing or inconsistent taxonomy file aborts the command.
        """
        if self._taxonomy is None:
            from rulectl.domain.taxonomy import TaxonomyError
            from rulectl.infrastructure.taxonomy_loader import load_taxonomy

            path = self._taxonomy_override or self.settings.taxonomy_path()
            try:
                self._taxonomy = load_taxonomy(path)
            except OSError as exc:
                msg = f"Cannot read taxonomy {path}: {exc.strerror or exc}"
                raise click.ClickException(msg) from exc
            except TaxonomyError as exc:
                msg = f"Invalid taxonomy: {exc}"
                raise click.ClickException(msg) from exc
        return self._taxonomy

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout. Warnings go to stderr so they don't
          pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                self.emit_warnings(result)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_warnings(self, result: ServiceResult) -> None:
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)

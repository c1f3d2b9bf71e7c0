"""Click command classes shared by every rulectl command.

Commands declared with ``examples=...`` grow an eager ``--examples`` flag
that prints the examples and exits, so ``--help`` stays short.
"""

from __future__ import annotations

from typing import Any

import click


class _ExamplesMixin:
    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(  # type: ignore[attr-defined]
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


class RuleCommand(_ExamplesMixin, click.Command):
    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class RuleGroup(_ExamplesMixin, click.Group):
    """Group whose subcommands default to :class:`RuleCommand`."""

    command_class = RuleCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


def split_library_options(values: tuple[str, ...]) -> list[str]:
    """Flatten repeated and comma-separated ``--select`` values."""
    libraries: list[str] = []
    for value in values:
        libraries.extend(part.strip() for part in value.split(",") if part.strip())
    return libraries

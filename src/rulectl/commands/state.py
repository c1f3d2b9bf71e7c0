"""Command group: shareable selection state (encode, decode, diff)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from rulectl.commands._base import RuleGroup, split_library_options

if TYPE_CHECKING:
    from rulectl.commands._context import AppContext
    from rulectl.services.state import StateService

_STATE_EXAMPLES = """\
  rulectl state encode react-query zustand
  rulectl state encode fastapi --base-url https://rules.example.com/
  rulectl state decode "https://rules.example.com/?libraries=fastapi,pytest"
  rulectl state diff --original fastapi,pytest --current fastapi,django"""


@click.group(cls=RuleGroup, examples=_STATE_EXAMPLES)
@click.pass_obj
def state(app: AppContext) -> None:
    """Encode and compare library selections for shareable links."""


def _service(app: AppContext) -> StateService:
    from rulectl.services.state import StateService

    return StateService(app.taxonomy, param=app.settings.url.param)


@state.command(
    examples="""\
  rulectl state encode react-query zustand
  rulectl -q state encode fastapi,pytest --base-url https://rules.example.com/"""
)
@click.argument("libraries", nargs=-1, required=True)
@click.option("--base-url", default=None, help="Build a full link on this URL.")
@click.pass_obj
def encode(app: AppContext, libraries: tuple[str, ...], base_url: str | None) -> None:
    """Encode LIBRARIES as a URL parameter."""
    app.emit(
        _service(app).encode(
            split_library_options(libraries),
            base_url=base_url or app.settings.url.base_url,
        )
    )


@state.command(
    examples="""\
  rulectl state decode react-query,zustand
  rulectl state decode '?libraries=fastapi%2Cpytest'"""
)
@click.argument("value")
@click.pass_obj
def decode(app: AppContext, value: str) -> None:
    """Decode VALUE (parameter value, query string, or URL) into a selection."""
    app.emit(_service(app).decode(value))


@state.command(
    examples="""\
  rulectl state diff --original fastapi,pytest --current fastapi"""
)
@click.option("--original", required=True, help="Saved selection (encoded).")
@click.option("--current", required=True, help="Current selection (encoded).")
@click.pass_obj
def diff(app: AppContext, original: str, current: str) -> None:
    """Report whether CURRENT differs from the saved ORIGINAL selection."""
    app.emit(_service(app).diff(original, current))

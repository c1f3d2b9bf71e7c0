"""Rich Console factory and theme for rulectl output.

Consoles render to a StringIO buffer so ``format_result() -> str`` stays
the output contract. In non-TTY environments (tests, pipes) Rich drops
color codes automatically.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RULE_THEME = Theme(
    {
        "rule.ok": "bold green",
        "rule.error": "bold red",
        "rule.warning": "bold yellow",
        "rule.op": "bold cyan",
        "rule.key": "dim",
        "rule.id": "bold blue",
        "rule.path": "dim",
        "rule.layer": "bold magenta",
        "rule.stack": "cyan",
        "rule.added": "green",
        "rule.removed": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=RULE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()

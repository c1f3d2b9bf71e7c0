"""Tests for the --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from rulectl.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["generate", "--examples"], ["rulectl generate --select", "--strategy multi"]),
    (["taxonomy", "--examples"], ["rulectl taxonomy layers", "rulectl taxonomy show"]),
    (["taxonomy", "layers", "--examples"], ["--layer backend"]),
    (["taxonomy", "show", "--examples"], ["rulectl taxonomy show"]),
    (["state", "--examples"], ["rulectl state encode", "rulectl state diff"]),
    (["state", "encode", "--examples"], ["--base-url"]),
    (["state", "decode", "--examples"], ["rulectl state decode"]),
    (["state", "diff", "--examples"], ["--original"]),
    (["detect", "--examples"], ["rulectl detect package.json"]),
    (["export", "--examples"], ["rulectl export prepared"]),
    (["export", "prepared", "--examples"], ["--output"]),
    (["export", "markdown", "--examples"], ["--output"]),
]


@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output

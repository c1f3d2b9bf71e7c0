"""Markdown builders for rules documents.

Every function here is pure: identical inputs produce identical output.
Project headers come from the packaged ``templates/rules`` Jinja2
templates; library sections are assembled directly.

Placeholder substitution is best-effort. ``{{ key }}`` tokens with a
matching context key are replaced, everything else is left verbatim.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from rulectl.domain.selection import ProjectContext, RulesContent
from rulectl.domain.taxonomy import library_file_name
from rulectl.domain.types import layer_display_name
from rulectl.infrastructure.templates import build_template_environment

if TYPE_CHECKING:
    from collections.abc import Container

    from jinja2 import Environment

    from rulectl.domain.taxonomy import Taxonomy
    from rulectl.domain.types import Layer

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")

PROJECT_LABEL = "Project"
PROJECT_FILE_NAME = "project.mdc"
ALL_RULES_LABEL = "All Rules"
ALL_RULES_FILE_NAME = "rules.mdc"


def substitute_placeholders(text: str, values: dict[str, str]) -> str:
    """Replace known ``{{ key }}`` tokens; unknown tokens stay as written."""

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return values[key] if key in values else match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def find_unresolved_placeholders(text: str, known: Container[str] = ()) -> list[str]:
    """Placeholder keys in *text* outside *known*, in first-seen order."""
    seen: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        if match.group(1) not in known and match.group(1) not in seen:
            seen.append(match.group(1))
    return seen


def create_project_markdown(
    name: str,
    description: str,
    *,
    environment: Environment | None = None,
) -> str:
    """Leading project-summary block."""
    env = environment or build_template_environment("rules")
    return env.get_template("project.md.j2").render(name=name, description=description)


def create_project_rules_content(
    name: str,
    description: str,
    *,
    environment: Environment | None = None,
) -> RulesContent:
    """Project-summary document placed first in multi-file output."""
    return RulesContent(
        markdown=create_project_markdown(name, description, environment=environment),
        label=PROJECT_LABEL,
        file_name=PROJECT_FILE_NAME,
    )


def create_empty_project_rules_content(
    name: str,
    description: str,
    *,
    environment: Environment | None = None,
) -> list[RulesContent]:
    """Single fallback document returned when nothing is selected."""
    env = environment or build_template_environment("rules")
    markdown = env.get_template("empty_project.md.j2").render(name=name, description=description)
    return [RulesContent(markdown=markdown, label=PROJECT_LABEL, file_name=PROJECT_FILE_NAME)]


def create_library_file_metadata(
    taxonomy: Taxonomy,
    layer: Layer,
    stack: str,
    library: str,
) -> tuple[str, str]:
    """Return ``(label, file_name)`` for a standalone library document."""
    label = " - ".join(
        (
            layer_display_name(layer),
            taxonomy.stack(stack).name,
            taxonomy.library(library).name,
        )
    )
    return label, library_file_name(layer, stack, library)


def render_library_section(
    taxonomy: Taxonomy,
    layer: Layer,
    stack: str,
    library: str,
    *,
    include_layer_header: bool,
    include_stack_header: bool,
    context: ProjectContext | None = None,
) -> str:
    """Render one library's rules, optionally preceded by layer/stack headings."""
    entry = taxonomy.library(library)
    values = (context or ProjectContext()).placeholders()

    parts: list[str] = []
    if include_layer_header:
        parts.append(f"## {layer_display_name(layer)}\n\n")
    if include_stack_header:
        parts.append(f"### Guidelines for {taxonomy.stack(stack).name}\n\n")
    parts.append(f"#### {entry.name}\n\n")
    for rule in entry.rules:
        parts.append(f"- {substitute_placeholders(rule, values)}\n")
    parts.append("\n")
    return "".join(parts)

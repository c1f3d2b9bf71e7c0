"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, rulectl.toml only contains overrides.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from rulectl.domain.types import StrategyKind
from rulectl.domain.url_state import DEFAULT_PARAM


class ProjectConfig(BaseModel):
    """[project] section."""

    model_config = {"frozen": True}

    name: str = "my-project"
    description: str = ""


class RulesConfig(BaseModel):
    """[rules] section."""

    model_config = {"frozen": True}

    strategy: StrategyKind = StrategyKind.SINGLE
    warn_unresolved_placeholders: bool = False


class TaxonomyConfig(BaseModel):
    """[taxonomy] section."""

    model_config = {"frozen": True}

    path: Path | None = None


class UrlConfig(BaseModel):
    """[url] section."""

    model_config = {"frozen": True}

    base_url: str | None = None
    param: str = DEFAULT_PARAM


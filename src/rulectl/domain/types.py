"""Closed enums for the taxonomy and generation modes."""

from __future__ import annotations

from enum import StrEnum


class Layer(StrEnum):
    """Top-level technology categories."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    TESTING = "testing"
    INFRASTRUCTURE = "infrastructure"
    CODING = "coding"
    ACCESSIBILITY = "accessibility"


LAYER_DISPLAY_NAMES: dict[Layer, str] = {
    Layer.FRONTEND: "Frontend",
    Layer.BACKEND: "Backend",
    Layer.DATABASE: "Database",
    Layer.TESTING: "Testing",
    Layer.INFRASTRUCTURE: "Infrastructure",
    Layer.CODING: "Coding",
    Layer.ACCESSIBILITY: "Accessibility",
}


class StrategyKind(StrEnum):
    """Available rules generation strategies."""

    SINGLE = "single"
    MULTI = "multi"


def layer_display_name(layer: Layer | str) -> str:
    """Human-readable heading for a layer identifier."""
    return LAYER_DISPLAY_NAMES[Layer(layer)]

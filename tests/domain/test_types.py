"""Tests for taxonomy enums."""

from __future__ import annotations

import pytest

from rulectl.domain.types import LAYER_DISPLAY_NAMES, Layer, StrategyKind, layer_display_name


class TestLayer:
    def test_members(self) -> None:
        assert [layer.value for layer in Layer] == [
            "frontend",
            "backend",
            "database",
            "testing",
            "infrastructure",
            "coding",
            "accessibility",
        ]

    def test_every_layer_has_display_name(self) -> None:
        assert set(LAYER_DISPLAY_NAMES) == set(Layer)

    def test_display_name_accepts_string(self) -> None:
        assert layer_display_name("frontend") == "Frontend"

    def test_display_name_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            layer_display_name("mobile")


class TestStrategyKind:
    def test_values(self) -> None:
        assert {kind.value for kind in StrategyKind} == {"single", "multi"}

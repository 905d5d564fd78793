"""Unit tests for mailblocks.colors.contrast: the color safety engine."""
from __future__ import annotations

import warnings

import pytest

from mailblocks.colors.contrast import (
    contrast_ratio,
    get_safe_body_color,
    get_safe_headline_color,
    get_safe_text_color,
    is_too_dark,
    is_too_vibrant,
    is_valid_hex,
    meets_contrast_standard,
    parse_hex,
    relative_luminance,
    validate_hex_color,
)
from mailblocks.errors import ColorSafetyWarning
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity


class TestHexHelpers:
    @pytest.mark.parametrize("color", ["#000000", "#FFFFFF", "#7c3aed"])
    def test_valid(self, color: str) -> None:
        assert is_valid_hex(color)

    @pytest.mark.parametrize("color", ["#fff", "000000", "#gggggg", "", None, 123])
    def test_invalid(self, color: object) -> None:
        assert not is_valid_hex(color)

    def test_parse_hex(self) -> None:
        assert parse_hex("#ff8000") == (255, 128, 0)

    def test_parse_hex_rejects_short_form(self) -> None:
        with pytest.raises(ValueError):
            parse_hex("#fff")

    def test_validate_hex_color(self) -> None:
        assert validate_hex_color("#123456") == "#123456"
        assert validate_hex_color("blue") is None
        assert validate_hex_color(None) is None


class TestLuminanceAndContrast:
    def test_luminance_extremes(self) -> None:
        assert relative_luminance("#000000") == pytest.approx(0.0)
        assert relative_luminance("#ffffff") == pytest.approx(1.0)

    def test_black_on_white_is_21(self) -> None:
        assert contrast_ratio("#000000", "#ffffff") == pytest.approx(21.0)

    def test_ratio_is_symmetric(self) -> None:
        assert contrast_ratio("#7c3aed", "#ffffff") == pytest.approx(
            contrast_ratio("#ffffff", "#7c3aed")
        )

    def test_same_color_is_1(self) -> None:
        assert contrast_ratio("#336699", "#336699") == pytest.approx(1.0)

    def test_meets_standard(self) -> None:
        assert meets_contrast_standard("#111827", "#ffffff")
        assert not meets_contrast_standard("#ffff00", "#ffffff")

    def test_safe_text_color(self) -> None:
        assert get_safe_text_color("#ffffff") == "#000000"
        assert get_safe_text_color("#111111") == "#ffffff"

    def test_vibrant_and_dark(self) -> None:
        assert is_too_vibrant("#f0f0f0")
        assert not is_too_vibrant("#777777")
        assert is_too_dark("#101010")
        assert not is_too_dark("#777777")


class TestSafeHeadlineColor:
    def test_low_contrast_color_replaced(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ColorSafetyWarning)
            assert get_safe_headline_color("#ffff00", "#ffffff", "#111111") == "#111111"

    def test_readable_color_kept(self) -> None:
        assert get_safe_headline_color("#000000", "#ffffff", "#111111") == "#000000"

    def test_missing_color_selects_fallback_silently(self) -> None:
        diagnostics: list[Diagnostic] = []
        assert get_safe_headline_color(None, "#ffffff", "#111111", diagnostics) == "#111111"
        assert diagnostics == []

    def test_override_recorded_as_diagnostic(self) -> None:
        diagnostics: list[Diagnostic] = []
        get_safe_headline_color("#ffff00", "#ffffff", "#111111", diagnostics, "headlineColor")
        assert len(diagnostics) == 1
        assert diagnostics[0].code == "MB102"
        assert diagnostics[0].severity == DiagnosticSeverity.WARNING
        assert diagnostics[0].path == "headlineColor"

    def test_invalid_hex_is_mb101(self) -> None:
        diagnostics: list[Diagnostic] = []
        assert get_safe_headline_color("red", "#ffffff", "#111111", diagnostics) == "#111111"
        assert diagnostics[0].code == "MB101"

    def test_override_warns_without_diagnostics_list(self) -> None:
        with pytest.warns(ColorSafetyWarning):
            get_safe_headline_color("#ffff00", "#ffffff", "#111111")


class TestSafeBodyColor:
    def test_vibrant_color_rejected_even_on_dark_background(self) -> None:
        diagnostics: list[Diagnostic] = []
        assert get_safe_body_color("#fafafa", "#000000", "#dddddd", diagnostics) == "#dddddd"
        assert diagnostics[0].code == "MB103"

    def test_readable_body_color_kept(self) -> None:
        assert get_safe_body_color("#374151", "#ffffff", "#111111") == "#374151"

    def test_low_contrast_body_color_replaced(self) -> None:
        diagnostics: list[Diagnostic] = []
        assert get_safe_body_color("#cccccc", "#ffffff", "#374151", diagnostics) == "#374151"
        assert diagnostics[0].code == "MB102"
        assert diagnostics[0].path == "bodyTextColor"

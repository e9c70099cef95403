"""Tests for placeholder substitution and plural form selection."""

from __future__ import annotations

import logging

import pytest

from transcat.formatting import PlaceholderFormatter, placeholders_in
from transcat.plural import SimplePluralRules, form_order, select_form
from transcat.protocols import LocaleIdentifier, PluralCategory


@pytest.fixture
def formatter() -> PlaceholderFormatter:
    return PlaceholderFormatter()


class TestPlaceholderFormatter:
    """Test %1..%9 and %% handling."""

    def test_positional_substitution(self, formatter):
        assert formatter.format("Đã sao chép %1 trên %2", ["3", "10"]) == "Đã sao chép 3 trên 10"

    def test_reordered_placeholders(self, formatter):
        assert formatter.format("%2 / %1", ["a", "b"]) == "b / a"

    def test_repeated_placeholder(self, formatter):
        assert formatter.format("%1-%1", ["x"]) == "x-x"

    def test_escaped_percent(self, formatter):
        assert formatter.format("100%% complete") == "100% complete"

    def test_escape_before_digit(self, formatter):
        assert formatter.format("%%1 is literal, %1 is not", ["x"]) == "%1 is literal, x is not"

    def test_out_of_range_left_literal(self, formatter):
        result = formatter.format_result("%1 of %2 (%3)", ["1", "2"])
        assert result.text == "1 of 2 (%3)"
        assert result.unresolved == ("%3",)
        assert not result.complete

    def test_mismatch_logged_at_debug(self, formatter, caplog):
        with caplog.at_level(logging.DEBUG, logger="transcat.formatting"):
            formatter.format("%1 %2", ["a"])
        assert any("PlaceholderMismatch" in r.getMessage() for r in caplog.records)
        assert all(r.levelno == logging.DEBUG for r in caplog.records)

    def test_arguments_not_rescanned(self, formatter):
        assert formatter.format("%1 and %2", ["%2", "b"]) == "%2 and b"

    def test_two_digit_index_is_single_digit_placeholder(self, formatter):
        assert formatter.format("%10", ["a"]) == "a0"

    def test_lone_percent_untouched(self, formatter):
        assert formatter.format("50% done, %x", ["a"]) == "50% done, %x"

    def test_non_string_arguments(self, formatter):
        assert formatter.format("%1 items", [5]) == "5 items"

    def test_count_placeholder(self, formatter):
        assert formatter.format("%n tệp", count=3) == "3 tệp"
        assert formatter.format("%n tệp") == "%n tệp"

    def test_no_placeholders_fast_path(self, formatter):
        result = formatter.format_result("Plain", ["unused"])
        assert result.text == "Plain"
        assert result.complete

    def test_placeholders_in(self):
        assert placeholders_in("%1 of %2, 100%%, %n") == {"%1", "%2", "%n"}


class TestPluralSelection:
    """Test numerus form selection."""

    def test_form_order(self):
        assert form_order("vi") == (PluralCategory.OTHER,)
        assert form_order("en_US") == (PluralCategory.ONE, PluralCategory.OTHER)
        assert form_order("ru")[2] is PluralCategory.MANY

    def test_select_by_category(self):
        forms = ("%n файл", "%n файла", "%n файлов")
        assert select_form(forms, PluralCategory.ONE, "ru") == "%n файл"
        assert select_form(forms, PluralCategory.FEW, "ru") == "%n файла"
        assert select_form(forms, PluralCategory.MANY, "ru") == "%n файлов"

    def test_unknown_category_uses_last_form(self):
        assert select_form(("one", "other"), PluralCategory.FEW, "en") == "other"

    def test_missing_forms_clamped(self):
        assert select_form(("%n file",), PluralCategory.OTHER, "en") == "%n file"

    def test_no_forms(self):
        assert select_form((), PluralCategory.ONE, "en") is None

    @pytest.mark.parametrize(
        "language,count,expected",
        [
            ("en", 1, PluralCategory.ONE),
            ("en", 2, PluralCategory.OTHER),
            ("vi", 1, PluralCategory.OTHER),
            ("fr", 0, PluralCategory.ONE),
            ("ru", 21, PluralCategory.ONE),
            ("ru", 3, PluralCategory.FEW),
            ("ru", 11, PluralCategory.MANY),
            ("pl", 22, PluralCategory.FEW),
            ("cs", 4, PluralCategory.FEW),
            ("ar", 0, PluralCategory.ZERO),
        ],
    )
    def test_simple_rules(self, language, count, expected):
        rules = SimplePluralRules()
        assert rules.get_category(count, LocaleIdentifier.parse(language)) is expected

    def test_register_custom_rule(self):
        rules = SimplePluralRules()
        rules.register("xx", lambda n: PluralCategory.TWO)
        assert rules.get_category(7, LocaleIdentifier.parse("xx")) is PluralCategory.TWO

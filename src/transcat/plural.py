"""Plural form selection for numerus entries.

A numerus entry stores its plural bodies as an ordered list whose order is
fixed per language (e.g. Russian: one, few, many). This module maps a
plural category onto that list and ships a small rule provider for the
common languages. Full CLDR evaluation is left to a pluggable
``PluralRuleProvider``.

Usage:
    from transcat.plural import SimplePluralRules, select_form

    rules = SimplePluralRules()
    category = rules.get_category(3, LocaleIdentifier.parse("ru"))  # FEW
    body = select_form(("%n файл", "%n файла", "%n файлов"), category, "ru")
"""

from __future__ import annotations

from typing import Callable, Sequence

from transcat.protocols import LocaleIdentifier, PluralCategory


PluralRuleFunc = Callable[[int], PluralCategory]

_ONE_OTHER = (PluralCategory.ONE, PluralCategory.OTHER)
_OTHER_ONLY = (PluralCategory.OTHER,)
_ONE_FEW_MANY = (PluralCategory.ONE, PluralCategory.FEW, PluralCategory.MANY)
_ONE_FEW_OTHER = (PluralCategory.ONE, PluralCategory.FEW, PluralCategory.OTHER)

# Order of numerus forms as stored in catalogs, per language.
FORM_ORDER: dict[str, tuple[PluralCategory, ...]] = {
    **{lang: _OTHER_ONLY for lang in ("ja", "ko", "zh", "vi", "th", "id", "ms", "tr", "ka", "lo", "my")},
    **{lang: _ONE_FEW_MANY for lang in ("ru", "uk", "be", "sr", "hr", "bs", "pl")},
    **{lang: _ONE_FEW_OTHER for lang in ("cs", "sk")},
    "ar": (
        PluralCategory.ZERO,
        PluralCategory.ONE,
        PluralCategory.TWO,
        PluralCategory.FEW,
        PluralCategory.MANY,
        PluralCategory.OTHER,
    ),
    "he": (PluralCategory.ONE, PluralCategory.TWO, PluralCategory.OTHER),
}


def form_order(language: str | LocaleIdentifier) -> tuple[PluralCategory, ...]:
    """Categories in storage order for a language (default: one, other)."""
    locale = LocaleIdentifier.parse(language)
    return FORM_ORDER.get(locale.language, _ONE_OTHER)


def select_form(
    forms: Sequence[str],
    category: PluralCategory,
    language: str | LocaleIdentifier,
) -> str | None:
    """Pick the body for ``category`` from ordered numerus forms.

    Unknown categories use the last form, which holds the general case.
    Missing trailing forms clamp to the last available one.

    Returns:
        The selected body, or None when there are no forms
    """
    if not forms:
        return None
    order = form_order(language)
    if category in order:
        position = order.index(category)
    else:
        position = len(order) - 1
    return forms[min(position, len(forms) - 1)]


def _one_other(n: int) -> PluralCategory:
    return PluralCategory.ONE if n == 1 else PluralCategory.OTHER


def _no_plural(n: int) -> PluralCategory:
    return PluralCategory.OTHER


def _french(n: int) -> PluralCategory:
    return PluralCategory.ONE if n in (0, 1) else PluralCategory.OTHER


def _east_slavic(n: int) -> PluralCategory:
    i10, i100 = n % 10, n % 100
    if i10 == 1 and i100 != 11:
        return PluralCategory.ONE
    if 2 <= i10 <= 4 and not 12 <= i100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.MANY


def _polish(n: int) -> PluralCategory:
    i10, i100 = n % 10, n % 100
    if n == 1:
        return PluralCategory.ONE
    if 2 <= i10 <= 4 and not 12 <= i100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.MANY


def _czech(n: int) -> PluralCategory:
    if n == 1:
        return PluralCategory.ONE
    if 2 <= n <= 4:
        return PluralCategory.FEW
    return PluralCategory.OTHER


def _arabic(n: int) -> PluralCategory:
    n100 = n % 100
    if n == 0:
        return PluralCategory.ZERO
    if n == 1:
        return PluralCategory.ONE
    if n == 2:
        return PluralCategory.TWO
    if 3 <= n100 <= 10:
        return PluralCategory.FEW
    if 11 <= n100 <= 99:
        return PluralCategory.MANY
    return PluralCategory.OTHER


def _hebrew(n: int) -> PluralCategory:
    if n == 1:
        return PluralCategory.ONE
    if n == 2:
        return PluralCategory.TWO
    return PluralCategory.OTHER


class SimplePluralRules:
    """Integer plural rules for the languages in ``FORM_ORDER``.

    Not a CLDR implementation: fractional counts are truncated and
    languages without a registered rule use one/other. Register custom
    rules with ``register()`` or inject a full provider into the resolver.
    """

    def __init__(self) -> None:
        self._rules: dict[str, PluralRuleFunc] = {}
        self._register_default_rules()

    def _register_default_rules(self) -> None:
        for lang, order in FORM_ORDER.items():
            if order == _OTHER_ONLY:
                self._rules[lang] = _no_plural
        for lang in ("ru", "uk", "be", "sr", "hr", "bs"):
            self._rules[lang] = _east_slavic
        self._rules["pl"] = _polish
        self._rules["cs"] = _czech
        self._rules["sk"] = _czech
        self._rules["ar"] = _arabic
        self._rules["he"] = _hebrew
        self._rules["fr"] = _french

    def register(self, language: str, rule: PluralRuleFunc) -> None:
        """Register or replace the rule for a language."""
        self._rules[language.lower()] = rule

    def get_category(
        self,
        count: float | int,
        locale: LocaleIdentifier,
    ) -> PluralCategory:
        rule = self._rules.get(locale.language, _one_other)
        return rule(abs(int(count)))

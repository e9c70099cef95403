"""Runtime message resolution.

``Translator`` is the API the rest of an application talks to:

1. exact (context, source, disambiguation) lookup through the locale
   manager's fallback chain;
2. a supplied disambiguation is never dropped for a retry without it;
3. with nothing translated anywhere in the chain, the source text itself
   is used;
4. positional placeholders are substituted into whichever text won.

Usage:
    translator = store.translator()
    translator.translate("TorrentContentTreeView", "Normal", "priority")
    translator.translate("TransferListWidget", "Copied %1 of %2", args=["3", "10"])
    translator.translate_plural("TorrentContentModel", "%n file(s)", count=5)
"""

from __future__ import annotations

from typing import Any, Callable, Sequence, Union

from transcat.formatting import PlaceholderFormatter
from transcat.manager import ChainMatch, LocaleManager
from transcat.plural import SimplePluralRules, select_form
from transcat.protocols import (
    LocaleIdentifier,
    LookupKey,
    PluralCategory,
    PluralRuleProvider,
    ResolvedMessage,
)


ManagerRef = Union[LocaleManager, Callable[[], LocaleManager]]


def translate_noop(context: str, source_text: str, disambiguation: str | None = None) -> str:
    """Mark a string for extraction without translating it."""
    return source_text


class Translator:
    """Resolves and formats messages against a locale manager.

    The manager is read once per call. When bound to a callable (as done by
    ``CatalogStore.translator()``), a locale switch in the store is picked
    up by the next call without rebinding.
    """

    def __init__(
        self,
        manager: ManagerRef,
        formatter: PlaceholderFormatter | None = None,
        plural_rules: PluralRuleProvider | None = None,
    ) -> None:
        self._manager_ref = manager
        self._formatter = formatter or PlaceholderFormatter()
        self._plural_rules = plural_rules or SimplePluralRules()

    @property
    def manager(self) -> LocaleManager:
        if isinstance(self._manager_ref, LocaleManager):
            return self._manager_ref
        return self._manager_ref()

    def _lookup(self, key: LookupKey) -> ChainMatch | None:
        return self.manager.lookup(key)

    def resolve(
        self,
        context: str,
        source_text: str,
        disambiguation: str | None = None,
        args: Sequence[Any] = (),
    ) -> ResolvedMessage:
        """Resolve a message and report where the text came from."""
        key = LookupKey.of(context, source_text, disambiguation)
        match = self._lookup(key)
        if match is None:
            return ResolvedMessage(
                key=key,
                text=self._formatter.format(source_text, args),
                fallback=True,
            )
        return ResolvedMessage(
            key=key,
            text=self._formatter.format(match.entry.translation, args),
            locale=match.locale,
            ambiguous=match.ambiguous,
            entry=match.entry,
        )

    def translate(
        self,
        context: str,
        source_text: str,
        disambiguation: str | None = None,
        args: Sequence[Any] = (),
    ) -> str:
        """Return the display string for a message.

        Args:
            context: Context name (usually the UI component)
            source_text: Untranslated reference text
            disambiguation: Comment distinguishing identical source texts
            args: Already formatted values for ``%1``..``%9``

        Returns:
            Fully substituted string; the source text when untranslated
        """
        return self.resolve(context, source_text, disambiguation, args).text

    def resolve_plural(
        self,
        context: str,
        source_text: str,
        *,
        count: int | None = None,
        category: PluralCategory | None = None,
        disambiguation: str | None = None,
        args: Sequence[Any] = (),
    ) -> ResolvedMessage:
        """Resolve a numerus message.

        The plural form is selected by ``category``; when only ``count`` is
        given, the category is computed by the plural rule provider for the
        locale that supplied the entry. ``%n`` is replaced by ``count``.
        """
        key = LookupKey.of(context, source_text, disambiguation)
        match = self._lookup(key)
        if match is None:
            return ResolvedMessage(
                key=key,
                text=self._formatter.format(source_text, args, count),
                fallback=True,
            )

        entry = match.entry
        template = entry.translation
        if entry.numerus:
            locale = LocaleIdentifier.parse(match.locale)
            if category is None:
                if count is not None:
                    category = self._plural_rules.get_category(count, locale)
                else:
                    category = PluralCategory.OTHER
            selected = select_form(entry.numerus_forms, category, locale)
            if selected is not None:
                template = selected

        return ResolvedMessage(
            key=key,
            text=self._formatter.format(template, args, count),
            locale=match.locale,
            ambiguous=match.ambiguous,
            entry=entry,
        )

    def translate_plural(
        self,
        context: str,
        source_text: str,
        *,
        count: int | None = None,
        category: PluralCategory | None = None,
        disambiguation: str | None = None,
        args: Sequence[Any] = (),
    ) -> str:
        """Plural-aware ``translate``; see ``resolve_plural``."""
        return self.resolve_plural(
            context,
            source_text,
            count=count,
            category=category,
            disambiguation=disambiguation,
            args=args,
        ).text

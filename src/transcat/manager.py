"""Locale manager.

Owns the mapping from a requested locale to the ordered list of catalog
indexes consulted for it (the fallback chain), e.g.::

    vi_VN -> vi -> <configured fallbacks> -> source text

The active chain is published as one immutable state object. A locale
switch builds the new state completely and then swaps the reference, so a
concurrent ``resolve()`` sees either the old or the new chain, never a mix.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Sequence

from transcat.index import CatalogIndex
from transcat.protocols import LocaleIdentifier, LookupKey, MessageEntry, MessageStatus


logger = logging.getLogger(__name__)

IndexProvider = Callable[[LocaleIdentifier], "CatalogIndex | None"]


@dataclass(frozen=True)
class ChainLink:
    """One locale in the fallback chain and its index."""
    locale: str
    index: CatalogIndex


@dataclass(frozen=True)
class ChainMatch:
    """A usable entry found while walking the chain."""
    entry: MessageEntry
    locale: str
    ambiguous: bool = False


@dataclass(frozen=True)
class _ActiveState:
    locale: LocaleIdentifier | None
    links: tuple[ChainLink, ...] = ()


class LocaleManager:
    """Resolves lookup keys against the active fallback chain.

    Example:
        manager = LocaleManager(provider=store.index_for)
        manager.set_active_locale("vi_VN")
        entry = manager.resolve(LookupKey.of("MainWindow", "&File"))
    """

    def __init__(
        self,
        provider: IndexProvider | None = None,
        fallback_locales: Sequence[str] = (),
        empty_translation_is_unfinished: bool = False,
    ) -> None:
        """Initialize the manager.

        Args:
            provider: Returns the index for a locale, or None if it has none
            fallback_locales: Locales appended after the derived chain
            empty_translation_is_unfinished: Skip empty translated bodies
        """
        self._provider = provider
        self._fallback_locales = tuple(LocaleIdentifier.parse(t) for t in fallback_locales)
        self._empty_is_unfinished = empty_translation_is_unfinished
        self._indexes: dict[str, CatalogIndex | None] = {}
        self._state = _ActiveState(None)
        self._lock = threading.Lock()

    @classmethod
    def from_links(
        cls,
        locale: str | LocaleIdentifier,
        links: Sequence[ChainLink],
        empty_translation_is_unfinished: bool = False,
    ) -> "LocaleManager":
        """Create a manager with a prebuilt chain and no provider."""
        manager = cls(empty_translation_is_unfinished=empty_translation_is_unfinished)
        for link in links:
            manager._indexes[link.locale] = link.index
        manager._state = _ActiveState(LocaleIdentifier.parse(locale), tuple(links))
        return manager

    @property
    def active_locale(self) -> LocaleIdentifier | None:
        return self._state.locale

    @property
    def chain(self) -> tuple[str, ...]:
        """Locale tags of the active chain, most specific first."""
        return tuple(link.locale for link in self._state.links)

    @property
    def links(self) -> tuple[ChainLink, ...]:
        return self._state.links

    def chain_for(self, identifier: str | LocaleIdentifier) -> list[LocaleIdentifier]:
        """Compute the fallback chain for a locale, without loading anything."""
        locale = LocaleIdentifier.parse(identifier)
        chain: list[LocaleIdentifier] = []
        for candidate in (*locale.fallback_chain(), *self._fallback_locales):
            for item in candidate.fallback_chain():
                if item not in chain:
                    chain.append(item)
        return chain

    def _index_for(self, locale: LocaleIdentifier) -> CatalogIndex | None:
        if locale.tag not in self._indexes:
            self._indexes[locale.tag] = self._provider(locale) if self._provider else None
        return self._indexes[locale.tag]

    def set_active_locale(self, identifier: str | LocaleIdentifier) -> tuple[str, ...]:
        """Build the chain for ``identifier`` and publish it atomically.

        Indexes already loaded by this manager are reused. Chain links
        without any catalog are left out.

        Returns:
            Locale tags of the new chain
        """
        locale = LocaleIdentifier.parse(identifier)
        with self._lock:
            links = []
            for link_locale in self.chain_for(locale):
                index = self._index_for(link_locale)
                if index is not None and len(index):
                    links.append(ChainLink(link_locale.tag, index))
            self._state = _ActiveState(locale, tuple(links))

        logger.info(
            "Active locale %s (chain: %s)",
            locale.tag,
            " -> ".join(f"{link.locale}[{len(link.index)}]" for link in links) or "source only",
        )
        return tuple(link.locale for link in links)

    def _usable(self, entry: MessageEntry) -> bool:
        if entry.status is not MessageStatus.TRANSLATED:
            return False
        if self._empty_is_unfinished:
            if entry.numerus:
                return any(entry.numerus_forms)
            return entry.translation != ""
        return True

    def lookup(self, key: LookupKey) -> ChainMatch | None:
        """Walk the active chain for the first usable entry.

        Unfinished entries are skipped, so a complete translation further
        down the chain wins over a half-done one in a more specific locale.
        """
        state = self._state
        for link in state.links:
            hit = link.index.lookup(key.context, key.source, key.disambiguation)
            if hit is not None and self._usable(hit.entry):
                return ChainMatch(hit.entry, link.locale, hit.ambiguous)
        return None

    def resolve(self, key: LookupKey) -> MessageEntry | None:
        """Return the first translated entry for ``key`` in the chain."""
        match = self.lookup(key)
        return match.entry if match else None

    def __repr__(self) -> str:
        locale = self._state.locale.tag if self._state.locale else None
        return f"LocaleManager(locale={locale!r}, chain={self.chain!r})"

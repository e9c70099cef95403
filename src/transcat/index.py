"""Catalog index.

Builds an immutable O(1) lookup table from parsed catalogs.

Conflict policy:
- The full key is (context, source text, disambiguation).
- When a key is defined more than once, the last definition wins
  (later catalogs and later positions supersede earlier ones).
- Every key defined more than once with differing bodies is recorded once
  as an ``AmbiguityDiagnostic`` and logged as ``AmbiguousKeyWarning``.
- Obsolete entries are never indexed.

A secondary index keyed by (context, source text) serves callers that
cannot supply a disambiguation comment. When several disambiguated
entries share the reduced key, the first-registered one is returned and
the lookup is flagged ambiguous.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from transcat.exceptions import AmbiguousKeyWarning
from transcat.protocols import Catalog, LookupKey, MessageEntry, MessageStatus


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AmbiguityDiagnostic:
    """A lookup key defined several times with different bodies.

    Attributes:
        key: The conflicting lookup key
        definitions: Number of definitions seen
        sources: Catalog sources of each definition, in registration order
        category: Warning category for log records
    """
    key: LookupKey
    definitions: int
    sources: tuple[str | None, ...] = ()
    category: type[Warning] = AmbiguousKeyWarning

    @property
    def context(self) -> str:
        return self.key.context

    @property
    def source_text(self) -> str:
        return self.key.source

    def describe(self) -> str:
        comment = f" ({self.key.disambiguation})" if self.key.disambiguation else ""
        return (
            f"{self.key.context}: {self.key.source!r}{comment} defined "
            f"{self.definitions} times with different translations; last one wins"
        )


@dataclass(frozen=True)
class IndexStats:
    """Counts gathered while building an index."""
    total: int = 0
    indexed: int = 0
    translated: int = 0
    unfinished: int = 0
    obsolete: int = 0
    duplicates: int = 0


@dataclass(frozen=True)
class IndexLookup:
    """Result of an index lookup."""
    entry: MessageEntry
    ambiguous: bool = False
    candidates: int = 1


class CatalogIndex:
    """Immutable lookup table over one or more catalogs.

    Safe for concurrent reads without locking.

    Example:
        index = CatalogIndex.build([core_catalog, plugin_catalog], locale="vi")
        hit = index.lookup("TorrentContentTreeView", "Normal", "priority")
        if hit and hit.entry.is_translated:
            print(hit.entry.translation)
    """

    __slots__ = ("_entries", "_reduced", "_diagnostics", "_locale", "_stats")

    def __init__(
        self,
        entries: Mapping[LookupKey, MessageEntry],
        reduced: Mapping[tuple[str, str], tuple[MessageEntry, ...]],
        diagnostics: tuple[AmbiguityDiagnostic, ...] = (),
        locale: str | None = None,
        stats: IndexStats | None = None,
    ) -> None:
        self._entries = MappingProxyType(dict(entries))
        self._reduced = MappingProxyType(dict(reduced))
        self._diagnostics = tuple(diagnostics)
        self._locale = locale
        self._stats = stats or IndexStats(indexed=len(self._entries))

    @classmethod
    def empty(cls, locale: str | None = None) -> "CatalogIndex":
        return cls({}, {}, locale=locale)

    @classmethod
    def build(
        cls,
        catalogs: Catalog | Iterable[Catalog],
        locale: str | None = None,
        log_ambiguities: bool = True,
    ) -> "CatalogIndex":
        """Build an index from catalogs, in registration order.

        Catalogs sharing a context name are treated as one concatenated
        entry list; the conflict policy applies across all of them.

        Args:
            catalogs: A catalog or an ordered iterable of catalogs
            locale: Locale tag the index serves
            log_ambiguities: Log conflicts at WARNING (DEBUG otherwise)

        Returns:
            The built index
        """
        if isinstance(catalogs, Catalog):
            catalogs = [catalogs]

        entries: dict[LookupKey, MessageEntry] = {}
        definitions: dict[LookupKey, list[tuple[MessageEntry, str | None]]] = defaultdict(list)
        total = obsolete = 0

        for catalog in catalogs:
            for entry in catalog.entries():
                total += 1
                if entry.status is MessageStatus.OBSOLETE:
                    obsolete += 1
                    continue
                key = entry.key
                definitions[key].append((entry, catalog.source))
                # Re-assignment keeps the key's first-registered position
                entries[key] = entry

        diagnostics = []
        duplicates = 0
        for key, defs in definitions.items():
            if len(defs) < 2:
                continue
            duplicates += 1
            if len({entry.body for entry, _ in defs}) < 2:
                continue
            diagnostic = AmbiguityDiagnostic(
                key=key,
                definitions=len(defs),
                sources=tuple(source for _, source in defs),
            )
            diagnostics.append(diagnostic)
            logger.log(
                logging.WARNING if log_ambiguities else logging.DEBUG,
                "%s: %s",
                AmbiguousKeyWarning.__name__,
                diagnostic.describe(),
            )

        reduced: dict[tuple[str, str], list[MessageEntry]] = defaultdict(list)
        for key, entry in entries.items():
            reduced[key.reduced].append(entry)

        stats = IndexStats(
            total=total,
            indexed=len(entries),
            translated=sum(1 for e in entries.values() if e.status is MessageStatus.TRANSLATED),
            unfinished=sum(1 for e in entries.values() if e.status is MessageStatus.UNFINISHED),
            obsolete=obsolete,
            duplicates=duplicates,
        )
        return cls(
            entries,
            {k: tuple(v) for k, v in reduced.items()},
            diagnostics=tuple(diagnostics),
            locale=locale,
            stats=stats,
        )

    @property
    def locale(self) -> str | None:
        return self._locale

    @property
    def diagnostics(self) -> tuple[AmbiguityDiagnostic, ...]:
        return self._diagnostics

    @property
    def stats(self) -> IndexStats:
        return self._stats

    def get(self, key: LookupKey) -> MessageEntry | None:
        """Exact lookup by full key."""
        return self._entries.get(key)

    def candidates(self, context: str, source: str) -> tuple[MessageEntry, ...]:
        """All entries sharing (context, source), in registration order."""
        return self._reduced.get((context, source), ())

    def lookup(
        self,
        context: str,
        source: str,
        disambiguation: str | None = None,
    ) -> IndexLookup | None:
        """Look up a message.

        A supplied disambiguation is matched exactly and never dropped.
        Without one, the undisambiguated entry is preferred; failing that
        the first-registered entry sharing (context, source) is returned.

        Returns:
            IndexLookup, or None when nothing matches
        """
        key = LookupKey.of(context, source, disambiguation)
        entry = self._entries.get(key)
        if entry is not None:
            return IndexLookup(entry)
        if key.disambiguation is not None:
            return None

        found = self._reduced.get(key.reduced)
        if not found:
            return None
        if len(found) > 1:
            logger.debug(
                "Ambiguous lookup %s: %r matches %d disambiguated entries; using %r",
                context,
                source,
                len(found),
                found[0].disambiguation,
            )
        return IndexLookup(found[0], ambiguous=len(found) > 1, candidates=len(found))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LookupKey]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"CatalogIndex(locale={self._locale!r}, entries={len(self._entries)})"

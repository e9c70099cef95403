"""Catalog store.

Process-wide point of truth for what is currently loaded. The store:

- registers catalogs per locale, from any number of modules (core
  application, plugins, ...), in registration order;
- builds and caches one ``CatalogIndex`` per locale over all catalogs of
  that locale, with the index conflict policy applied across modules;
- holds a single reference to the active ``LocaleManager`` and replaces it
  wholesale on a locale switch or reload.

Reloads are serialized: a second request waits for the running one, or is
rejected with ``ReloadInProgressError`` when ``blocking=False``. Lookups
never take a lock; they read the manager reference once per call.

Example:
    store = CatalogStore()
    result = store.load_catalog(Path("lang/app_vi.ts"))
    if not result.ok:
        log.warning("catalog rejected: %s", result.error)
    store.set_active_locale("vi_VN")
    tr = store.translator()
    tr.translate("TorrentContentTreeView", "Renaming")
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Sequence

from transcat.config import CatalogConfig
from transcat.exceptions import ParseError, ReloadInProgressError
from transcat.index import CatalogIndex
from transcat.manager import LocaleManager
from transcat.parser import CatalogInput, CatalogParser
from transcat.protocols import Catalog, LocaleIdentifier, PluralRuleProvider
from transcat.resolver import Translator
from transcat.sources import CatalogStorageBackend, FileSystemSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogHandle:
    """A catalog registered with a store."""
    id: int
    locale: str
    catalog: Catalog
    module: str | None = None

    @property
    def source(self) -> str | None:
        return self.catalog.source


@dataclass(frozen=True)
class LoadResult:
    """Outcome of ``CatalogStore.load_catalog``."""
    handle: CatalogHandle | None = None
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.handle is not None


class CatalogStore:
    """Registry of loaded catalogs and owner of the active locale manager."""

    def __init__(
        self,
        config: CatalogConfig | None = None,
        sources: Sequence[CatalogStorageBackend] | None = None,
        parser: CatalogParser | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Engine configuration (default: CatalogConfig())
            sources: Storage backends; defaults to one filesystem source
                per ``config.catalog_dirs`` entry
            parser: Parser for ``load_catalog``
        """
        self.config = config or CatalogConfig()
        self._parser = parser or CatalogParser()
        if sources is None:
            sources = [
                FileSystemSource(
                    directory,
                    file_pattern=self.config.file_pattern,
                    encoding=self.config.encoding,
                    parser=self._parser,
                )
                for directory in self.config.catalog_dirs
            ]
        self._sources = list(sources)

        self._handles: dict[str, list[CatalogHandle]] = {}
        self._indexes: dict[str, CatalogIndex | None] = {}
        self._ids = itertools.count(1)
        self._registry_lock = threading.RLock()
        self._reload_lock = threading.Lock()
        self._manager = self._new_manager()

    @classmethod
    def from_config(cls, config: CatalogConfig) -> "CatalogStore":
        """Create a store and activate ``config.default_locale`` if set."""
        store = cls(config)
        if config.default_locale:
            store.set_active_locale(config.default_locale)
        return store

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def load_catalog(
        self,
        source: CatalogInput,
        *,
        encoding: str | None = None,
        locale: str | None = None,
        module: str | None = None,
    ) -> LoadResult:
        """Parse and register a catalog document.

        A rejected document is reported in the result and logged; it never
        raises. Registration takes effect at the next locale switch or
        reload.

        Args:
            source: Bytes, document text, path or binary file object
            encoding: Declared encoding (default: config, then sniffed)
            locale: Override for the document's declared language
            module: Owning module name, informational

        Returns:
            LoadResult with either a handle or the parse error
        """
        try:
            catalog = self._parser.parse(source, encoding=encoding or self.config.encoding)
            handle = self.register(catalog, locale=locale, module=module)
        except ParseError as e:
            logger.warning("Rejected catalog %s", e)
            return LoadResult(error=e)
        return LoadResult(handle=handle)

    def register(
        self,
        catalog: Catalog,
        *,
        locale: str | None = None,
        module: str | None = None,
    ) -> CatalogHandle:
        """Register an already parsed catalog.

        Raises:
            ParseError: If no usable locale is declared or given
        """
        tag = locale or catalog.locale
        if not tag:
            raise ParseError("catalog declares no language; pass locale=", source=catalog.source)
        try:
            tag = LocaleIdentifier.parse(tag).tag
        except ValueError as e:
            raise ParseError(str(e), source=catalog.source) from e

        with self._registry_lock:
            handle = CatalogHandle(next(self._ids), tag, catalog, module)
            self._handles.setdefault(tag, []).append(handle)
            self._indexes.pop(tag, None)

        logger.debug(
            "Registered catalog %s for %s (%d messages, module=%s)",
            catalog.source or "<memory>",
            tag,
            len(catalog),
            module,
        )
        return handle

    def unload(self, handle: CatalogHandle) -> bool:
        """Unregister a catalog. Takes effect at the next switch or reload."""
        with self._registry_lock:
            handles = self._handles.get(handle.locale, [])
            if handle not in handles:
                return False
            handles.remove(handle)
            if not handles:
                del self._handles[handle.locale]
            self._indexes.pop(handle.locale, None)
            return True

    def handles(self, locale: str | None = None) -> list[CatalogHandle]:
        with self._registry_lock:
            if locale is not None:
                return list(self._handles.get(LocaleIdentifier.parse(locale).tag, []))
            return [h for hs in self._handles.values() for h in hs]

    def registered_locales(self) -> list[str]:
        """Locale tags with registered catalogs or catalogs in a source."""
        with self._registry_lock:
            tags = set(self._handles)
        for source in self._sources:
            tags.update(locale.tag for locale in source.list_locales())
        return sorted(tags)

    @property
    def sources(self) -> list[CatalogStorageBackend]:
        return list(self._sources)

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------

    def index_for(self, locale: str | LocaleIdentifier) -> CatalogIndex | None:
        """Index over every catalog of exactly this locale, cached.

        Source catalogs come first, then registered ones in registration
        order, so later registrations supersede earlier definitions.
        """
        locale = LocaleIdentifier.parse(locale)
        with self._registry_lock:
            if locale.tag in self._indexes:
                return self._indexes[locale.tag]

            catalogs: list[Catalog] = []
            for source in self._sources:
                catalogs.extend(source.load(locale))
            catalogs.extend(h.catalog for h in self._handles.get(locale.tag, []))

            index = None
            if catalogs:
                index = CatalogIndex.build(
                    catalogs,
                    locale=locale.tag,
                    log_ambiguities=self.config.log_ambiguities,
                )
            self._indexes[locale.tag] = index
            return index

    # ------------------------------------------------------------------
    # Active locale
    # ------------------------------------------------------------------

    def _new_manager(self) -> LocaleManager:
        return LocaleManager(
            provider=self.index_for,
            fallback_locales=self.config.fallback_locales,
            empty_translation_is_unfinished=self.config.empty_translation_is_unfinished,
        )

    @property
    def manager(self) -> LocaleManager:
        """The active locale manager."""
        return self._manager

    @property
    def active_locale(self) -> str | None:
        locale = self._manager.active_locale
        return locale.tag if locale else None

    def set_active_locale(
        self,
        identifier: str | LocaleIdentifier,
        *,
        blocking: bool = True,
    ) -> LocaleManager:
        """Build a manager for ``identifier`` and swap it in.

        Args:
            identifier: Locale tag such as "vi_VN"
            blocking: Wait for a running reload instead of rejecting

        Returns:
            The new active manager

        Raises:
            ReloadInProgressError: If ``blocking`` is False and a reload runs
        """
        if not self._reload_lock.acquire(blocking=blocking):
            raise ReloadInProgressError("a catalog reload is already in progress")
        try:
            manager = self._new_manager()
            manager.set_active_locale(identifier)
            self._manager = manager
            return manager
        finally:
            self._reload_lock.release()

    def reload(self, *, blocking: bool = True) -> LocaleManager:
        """Drop cached indexes, re-read sources and rebuild the active chain."""
        if not self._reload_lock.acquire(blocking=blocking):
            raise ReloadInProgressError("a catalog reload is already in progress")
        try:
            with self._registry_lock:
                self._indexes.clear()
            manager = self._new_manager()
            active = self._manager.active_locale
            if active is not None:
                manager.set_active_locale(active)
            self._manager = manager
            logger.info("Reloaded catalogs (locale: %s)", active.tag if active else None)
            return manager
        finally:
            self._reload_lock.release()

    def translator(
        self,
        plural_rules: PluralRuleProvider | None = None,
    ) -> Translator:
        """A translator that always reads this store's active manager."""
        return Translator(lambda: self._manager, plural_rules=plural_rules)

    def close(self) -> None:
        """Drop every catalog and fall back to source text."""
        with self._reload_lock:
            with self._registry_lock:
                self._handles.clear()
                self._indexes.clear()
            self._manager = LocaleManager()

    def __enter__(self) -> "CatalogStore":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CatalogStore(locale={self.active_locale!r}, locales={sorted(self._handles)!r})"

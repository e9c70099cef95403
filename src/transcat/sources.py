"""Catalog storage backends.

A backend supplies the parsed catalogs available for a locale. Parse
failures are logged and skipped so that one corrupt document never keeps
the other catalogs of a locale from loading.

Filesystem layout (default pattern ``*_{locale}.ts``)::

    lang/
      app_vi.ts
      app_vi_VN.ts
      plugin_vi.ts
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from transcat.exceptions import ParseError
from transcat.parser import CatalogInput, CatalogParser
from transcat.protocols import Catalog, LocaleIdentifier


logger = logging.getLogger(__name__)

_LOCALE_PATTERN = r"(?P<locale>[a-z]{2,3}(?:_[A-Z]{2}|_\d{3})?)"


def _glob_to_regex(pattern: str) -> str:
    # Matched against posix paths relative to the base directory
    parts = re.escape(pattern).split(r"\*\*")
    return ".*".join(p.replace(r"\*", "[^/]*").replace(r"\?", "[^/]") for p in parts)


class CatalogStorageBackend:
    """Base class for catalog storage backends."""

    def load(self, locale: LocaleIdentifier) -> list[Catalog]:
        """Load all catalogs for exactly this locale (no fallback).

        Args:
            locale: Target locale

        Returns:
            Catalogs in a stable order
        """
        raise NotImplementedError

    def list_locales(self) -> list[LocaleIdentifier]:
        """List locales this backend has catalogs for."""
        raise NotImplementedError

    @property
    def errors(self) -> list[ParseError]:
        """Parse failures seen by this backend."""
        return []


class FileSystemSource(CatalogStorageBackend):
    """Reads catalog files from a directory."""

    def __init__(
        self,
        base_path: Path | str,
        file_pattern: str = "*_{locale}.ts",
        encoding: str | None = None,
        parser: CatalogParser | None = None,
    ) -> None:
        """Initialize filesystem source.

        Args:
            base_path: Directory containing catalog files
            file_pattern: Glob with a ``{locale}`` placeholder
            encoding: Declared encoding, None to sniff
            parser: Parser to use (default: a new CatalogParser)
        """
        self.base_path = Path(base_path)
        self.file_pattern = file_pattern
        self.encoding = encoding
        self._parser = parser or CatalogParser()
        self._errors: dict[Path, ParseError] = {}

        head, _, tail = file_pattern.partition("{locale}")
        self._name_regex = re.compile(f"^{_glob_to_regex(head)}{_LOCALE_PATTERN}{_glob_to_regex(tail)}$")

    @property
    def errors(self) -> list[ParseError]:
        """Failures from the most recent read of each file."""
        return list(self._errors.values())

    def paths_for(self, locale: LocaleIdentifier) -> list[Path]:
        if not self.base_path.is_dir():
            return []
        pattern = self.file_pattern.format(locale=locale.tag)
        return sorted(p for p in self.base_path.glob(pattern) if p.is_file())

    def load(self, locale: LocaleIdentifier) -> list[Catalog]:
        catalogs = []
        for path in self.paths_for(locale):
            try:
                catalogs.append(self._parser.parse(path, encoding=self.encoding))
            except ParseError as e:
                self._errors[path] = e
                logger.warning("Skipping catalog %s", e)
            else:
                self._errors.pop(path, None)
        return catalogs

    def list_locales(self) -> list[LocaleIdentifier]:
        if not self.base_path.is_dir():
            return []
        locales = set()
        for path in self.base_path.rglob("*"):
            match = self._name_regex.match(path.relative_to(self.base_path).as_posix())
            if match and path.is_file():
                locales.add(LocaleIdentifier.parse(match.group("locale")))
        return sorted(locales, key=lambda loc: loc.tag)

    def __repr__(self) -> str:
        return f"FileSystemSource({str(self.base_path)!r}, {self.file_pattern!r})"


class MemorySource(CatalogStorageBackend):
    """In-memory catalog source, mainly for tests and embedded catalogs."""

    def __init__(self, parser: CatalogParser | None = None) -> None:
        self._parser = parser or CatalogParser()
        self._catalogs: dict[str, list[Catalog]] = {}
        self._errors: list[ParseError] = []

    @property
    def errors(self) -> list[ParseError]:
        return list(self._errors)

    def add(
        self,
        catalog: Catalog | CatalogInput,
        locale: str | None = None,
        encoding: str | None = None,
    ) -> Catalog | None:
        """Add a catalog or an unparsed document.

        Returns:
            The stored catalog, or None if the document was rejected
        """
        if not isinstance(catalog, Catalog):
            try:
                catalog = self._parser.parse(catalog, encoding=encoding)
            except ParseError as e:
                self._errors.append(e)
                logger.warning("Skipping catalog %s", e)
                return None

        tag = locale or catalog.locale
        try:
            if not tag:
                raise ParseError("catalog declares no language", source=catalog.source)
            try:
                key = LocaleIdentifier.parse(tag).tag
            except ValueError as e:
                raise ParseError(str(e), source=catalog.source) from e
        except ParseError as error:
            self._errors.append(error)
            logger.warning("Skipping catalog %s", error)
            return None
        self._catalogs.setdefault(key, []).append(catalog)
        return catalog

    def load(self, locale: LocaleIdentifier) -> list[Catalog]:
        return list(self._catalogs.get(locale.tag, []))

    def list_locales(self) -> list[LocaleIdentifier]:
        return [LocaleIdentifier.parse(tag) for tag in sorted(self._catalogs)]

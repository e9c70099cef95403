"""transcat - message catalog engine for translation-source catalogs.

Loads ``.ts`` translation catalogs, indexes them by (context, source,
disambiguation), resolves messages through a locale fallback chain and
substitutes positional placeholders.

Example:
    from transcat import CatalogStore

    store = CatalogStore()
    store.load_catalog(Path("lang/app_vi.ts"))
    store.set_active_locale("vi_VN")

    tr = store.translator()
    tr.translate("TransferListWidget", "Copied %1 of %2", args=["3", "10"])
"""

from transcat.checks import CatalogIssue, IssueSeverity, catalog_stats, check_catalog
from transcat.config import CatalogConfig
from transcat.exceptions import (
    AmbiguousKeyWarning,
    CatalogError,
    CatalogWarning,
    ConfigError,
    ParseError,
    PlaceholderMismatch,
    ReloadInProgressError,
)
from transcat.formatting import FormatResult, PlaceholderFormatter
from transcat.index import AmbiguityDiagnostic, CatalogIndex, IndexLookup, IndexStats
from transcat.manager import ChainLink, ChainMatch, LocaleManager
from transcat.parser import CatalogParser, parse_catalog, parse_file
from transcat.plural import SimplePluralRules, select_form
from transcat.protocols import (
    Catalog,
    Context,
    LocaleIdentifier,
    Location,
    LookupKey,
    MessageEntry,
    MessageStatus,
    PluralCategory,
    PluralRuleProvider,
    ResolvedMessage,
)
from transcat.resolver import Translator, translate_noop
from transcat.sources import CatalogStorageBackend, FileSystemSource, MemorySource
from transcat.store import CatalogHandle, CatalogStore, LoadResult

__version__ = "0.1.0"

__all__ = [
    # Data model
    "Catalog",
    "Context",
    "LocaleIdentifier",
    "Location",
    "LookupKey",
    "MessageEntry",
    "MessageStatus",
    "PluralCategory",
    "PluralRuleProvider",
    "ResolvedMessage",
    # Parsing
    "CatalogParser",
    "parse_catalog",
    "parse_file",
    # Index
    "AmbiguityDiagnostic",
    "CatalogIndex",
    "IndexLookup",
    "IndexStats",
    # Locale manager
    "ChainLink",
    "ChainMatch",
    "LocaleManager",
    # Resolution
    "FormatResult",
    "PlaceholderFormatter",
    "SimplePluralRules",
    "Translator",
    "select_form",
    "translate_noop",
    # Store
    "CatalogHandle",
    "CatalogStorageBackend",
    "CatalogStore",
    "FileSystemSource",
    "LoadResult",
    "MemorySource",
    # Checks
    "CatalogIssue",
    "IssueSeverity",
    "catalog_stats",
    "check_catalog",
    # Configuration
    "CatalogConfig",
    # Errors
    "AmbiguousKeyWarning",
    "CatalogError",
    "CatalogWarning",
    "ConfigError",
    "ParseError",
    "PlaceholderMismatch",
    "ReloadInProgressError",
]

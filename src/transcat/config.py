"""Configuration for the catalog engine.

Configuration can be built directly, read from environment variables or
loaded from a YAML/JSON file.

Environment variables:
    TRANSCAT_CATALOG_DIRS: Catalog directories (os.pathsep separated)
    TRANSCAT_FILE_PATTERN: Catalog file glob (default: *_{locale}.ts)
    TRANSCAT_LOCALE: Locale activated at startup
    TRANSCAT_FALLBACK_LOCALES: Extra fallback locales (comma separated)
    TRANSCAT_ENCODING: Declared catalog encoding (default: sniffed)
    TRANSCAT_EMPTY_IS_UNFINISHED: Treat empty translations as untranslated
    TRANSCAT_LOG_AMBIGUITIES: Log duplicate keys at WARNING (default: true)

Example file (``transcat.yaml``)::

    catalog_dirs: [lang]
    default_locale: vi_VN
    fallback_locales: [en]
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from transcat.exceptions import ConfigError
from transcat.protocols import LocaleIdentifier


ENV_PREFIX = "TRANSCAT_"


def _parse_bool(value: str, default: bool) -> bool:
    value = value.strip().lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


@dataclass
class CatalogConfig:
    """Configuration for catalog discovery and resolution.

    Attributes:
        catalog_dirs: Directories scanned for catalog files
        file_pattern: Glob for catalog files; ``{locale}`` is the locale tag
        default_locale: Locale activated when the store is created
        fallback_locales: Locales appended after the derived fallback chain
        encoding: Declared catalog encoding, None to sniff
        empty_translation_is_unfinished: Treat empty unmarked translations
            as untranslated instead of as a legitimate empty string
        log_ambiguities: Log duplicate-key conflicts at WARNING
    """

    catalog_dirs: list[Path] = field(default_factory=list)
    file_pattern: str = "*_{locale}.ts"
    default_locale: str | None = None
    fallback_locales: list[str] = field(default_factory=list)
    encoding: str | None = None
    empty_translation_is_unfinished: bool = False
    log_ambiguities: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.catalog_dirs, (str, Path)):
            self.catalog_dirs = [self.catalog_dirs]
        self.catalog_dirs = [Path(d) for d in self.catalog_dirs]
        if isinstance(self.fallback_locales, str):
            self.fallback_locales = [self.fallback_locales]
        self.fallback_locales = list(self.fallback_locales)

        if "{locale}" not in self.file_pattern:
            raise ConfigError(f"file_pattern must contain '{{locale}}': {self.file_pattern!r}")
        for tag in [self.default_locale, *self.fallback_locales]:
            if tag is None:
                continue
            try:
                LocaleIdentifier.parse(tag)
            except ValueError as e:
                raise ConfigError(str(e)) from e

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CatalogConfig":
        """Create a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "CatalogConfig":
        """Load from ``TRANSCAT_*`` environment variables."""
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            value = env.get(ENV_PREFIX + name)
            return value if value else None

        dirs = get("CATALOG_DIRS")
        fallbacks = get("FALLBACK_LOCALES")
        return cls(
            catalog_dirs=[Path(d) for d in dirs.split(os.pathsep) if d] if dirs else [],
            file_pattern=get("FILE_PATTERN") or "*_{locale}.ts",
            default_locale=get("LOCALE"),
            fallback_locales=[t.strip() for t in fallbacks.split(",") if t.strip()] if fallbacks else [],
            encoding=get("ENCODING"),
            empty_translation_is_unfinished=_parse_bool(get("EMPTY_IS_UNFINISHED") or "", False),
            log_ambiguities=_parse_bool(get("LOG_AMBIGUITIES") or "", True),
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "CatalogConfig":
        """Load from a ``.yaml``/``.yml`` or ``.json`` file.

        Relative catalog directories are resolved against the file's folder.
        """
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix not in (".yaml", ".yml", ".json"):
            raise ConfigError(f"Unsupported configuration format: {suffix or path.name}")

        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read configuration {path}: {e}") from e

        try:
            if suffix == ".json":
                data = json.loads(content)
            else:
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to parse configuration {path}: {e}") from e

        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration {path} must be a mapping")

        config = cls.from_dict(data)
        config.catalog_dirs = [
            d if d.is_absolute() else path.parent / d for d in config.catalog_dirs
        ]
        return config

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["catalog_dirs"] = [str(d) for d in self.catalog_dirs]
        return data

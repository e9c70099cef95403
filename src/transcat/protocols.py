"""Core data model and protocols for the catalog engine.

This module defines the value types shared by every component:

- MessageStatus / PluralCategory enums
- LocaleIdentifier: normalized (language, region) tag with fallback chain
- LookupKey: (context, source text, disambiguation) identity of a message
- MessageEntry / Context / Catalog: parsed catalog content
- ResolvedMessage: result of a runtime resolution
- PluralRuleProvider: collaborator that maps counts to plural categories

All catalog values are frozen; a catalog is replaced wholesale on reload,
never mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Protocol, runtime_checkable


# ==============================================================================
# Enums
# ==============================================================================

class MessageStatus(str, Enum):
    """Completion status of a catalog entry."""
    TRANSLATED = "translated"
    UNFINISHED = "unfinished"
    OBSOLETE = "obsolete"


class PluralCategory(str, Enum):
    """CLDR plural categories.

    Based on Unicode CLDR plural rules:
    https://cldr.unicode.org/index/cldr-spec/plural-rules
    """
    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


# ==============================================================================
# Locale
# ==============================================================================

@dataclass(frozen=True)
class LocaleIdentifier:
    """Normalized locale tag.

    Attributes:
        language: Lowercase language code (e.g., "vi", "en")
        region: Uppercase region code (e.g., "VN"), if any
    """
    language: str
    region: str | None = None

    @property
    def tag(self) -> str:
        """Catalog-style tag, e.g. "vi_VN"."""
        if self.region:
            return f"{self.language}_{self.region}"
        return self.language

    @property
    def base(self) -> "LocaleIdentifier":
        """The same locale without its region."""
        return LocaleIdentifier(self.language)

    @classmethod
    def parse(cls, tag: str | "LocaleIdentifier") -> "LocaleIdentifier":
        """Parse a locale tag.

        Supports "vi", "vi_VN", "vi-VN", "vi_VN.UTF-8" and "sr_Latn_RS"
        (script subtags are dropped).

        Args:
            tag: Locale tag string

        Returns:
            Parsed LocaleIdentifier

        Raises:
            ValueError: If the tag has no language part
        """
        if isinstance(tag, LocaleIdentifier):
            return tag

        # Strip codeset and modifier ("vi_VN.UTF-8@euro")
        cleaned = tag.strip().split(".")[0].split("@")[0]
        parts = [p for p in cleaned.replace("-", "_").split("_") if p]
        if not parts or not parts[0].isalpha():
            raise ValueError(f"Invalid locale tag: {tag!r}")

        language = parts[0].lower()
        region = None
        for part in parts[1:]:
            if len(part) == 2 and part.isalpha():
                region = part.upper()
            elif len(part) == 3 and part.isdigit():
                region = part
        return cls(language=language, region=region)

    def fallback_chain(self) -> list["LocaleIdentifier"]:
        """Most-specific-first chain, e.g. vi_VN -> vi."""
        chain = [self]
        if self.region:
            chain.append(self.base)
        return chain

    def __str__(self) -> str:
        return self.tag


# ==============================================================================
# Catalog content
# ==============================================================================

@dataclass(frozen=True)
class LookupKey:
    """Identity of a message: (context, source text, disambiguation)."""
    context: str
    source: str
    disambiguation: str | None = None

    @classmethod
    def of(
        cls,
        context: str,
        source: str,
        disambiguation: str | None = None,
    ) -> "LookupKey":
        # An empty comment means "no disambiguation"
        return cls(context, source, disambiguation or None)

    @property
    def reduced(self) -> tuple[str, str]:
        return (self.context, self.source)


@dataclass(frozen=True)
class Location:
    """Source-code provenance of a message."""
    filename: str | None
    line: int | None = None


@dataclass(frozen=True)
class MessageEntry:
    """The atomic translatable unit of a catalog.

    Attributes:
        context: Name of the owning context
        source_text: Untranslated reference string
        translation: Localized text (first numerus form for plural entries)
        status: Completion status
        disambiguation: Comment distinguishing identical source texts
        extra_comment: Translator guidance, never displayed
        translator_comment: Note left by the translator
        old_source: Previous source text kept by re-extraction
        locations: Provenance hints, in document order
        numerus_forms: Ordered plural bodies for numerus entries
        variants: Length variants, longest first
        extras: ``extra-*`` fields keyed without the prefix
    """
    context: str
    source_text: str
    translation: str = ""
    status: MessageStatus = MessageStatus.TRANSLATED
    disambiguation: str | None = None
    extra_comment: str | None = None
    translator_comment: str | None = None
    old_source: str | None = None
    old_comment: str | None = None
    locations: tuple[Location, ...] = ()
    numerus: bool = False
    numerus_forms: tuple[str, ...] = ()
    variants: tuple[str, ...] = ()
    extras: tuple[tuple[str, str], ...] = ()

    @property
    def key(self) -> LookupKey:
        return LookupKey.of(self.context, self.source_text, self.disambiguation)

    @property
    def is_translated(self) -> bool:
        return self.status is MessageStatus.TRANSLATED

    @property
    def body(self) -> tuple[str, ...] | str:
        """Comparable translation payload (forms for numerus entries)."""
        if self.numerus:
            return self.numerus_forms
        return self.translation


@dataclass(frozen=True)
class Context:
    """A named group of messages, usually one UI component."""
    name: str
    messages: tuple[MessageEntry, ...] = ()

    def __iter__(self) -> Iterator[MessageEntry]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class Catalog:
    """All messages of one document, for one locale.

    Attributes:
        locale: Target locale tag as declared by the document
        version: Format version ("2.1", ...), None for legacy documents
        contexts: Context groups in document order
        source_language: Language of the source texts, if declared
        source: Path or label the catalog was read from
    """
    locale: str | None
    version: str | None
    contexts: tuple[Context, ...] = ()
    source_language: str | None = None
    source: str | None = None

    def entries(self) -> Iterator[MessageEntry]:
        """Iterate over all entries in document order."""
        for context in self.contexts:
            yield from context.messages

    def context(self, name: str) -> Context | None:
        for context in self.contexts:
            if context.name == name:
                return context
        return None

    def count(self, status: MessageStatus) -> int:
        return sum(1 for entry in self.entries() if entry.status is status)

    def __len__(self) -> int:
        return sum(len(context) for context in self.contexts)


# ==============================================================================
# Resolution result
# ==============================================================================

@dataclass(frozen=True)
class ResolvedMessage:
    """Result of message resolution.

    Attributes:
        key: Requested lookup key
        text: Final, fully substituted display string
        locale: Tag of the catalog that supplied the text, None on fallback
        fallback: True when the source text was used
        ambiguous: True when a reduced-key lookup matched several entries
        entry: The winning catalog entry, if any
    """
    key: LookupKey
    text: str
    locale: str | None = None
    fallback: bool = False
    ambiguous: bool = False
    entry: MessageEntry | None = field(default=None, compare=False)


# ==============================================================================
# Protocols
# ==============================================================================

@runtime_checkable
class PluralRuleProvider(Protocol):
    """Maps a count to a plural category for a locale."""

    def get_category(
        self,
        count: float | int,
        locale: LocaleIdentifier,
    ) -> PluralCategory:
        ...

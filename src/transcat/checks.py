"""Consistency checks over a parsed catalog.

These checks never affect resolution; they report problems that would
otherwise only show up as odd strings at runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from transcat.formatting import placeholders_in
from transcat.index import CatalogIndex
from transcat.protocols import Catalog, MessageEntry, MessageStatus


class IssueSeverity(str, Enum):
    """Severity of a catalog issue."""
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class CatalogIssue:
    """A problem found in one catalog entry."""
    code: str
    severity: IssueSeverity
    message: str
    context: str
    source_text: str
    disambiguation: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "severity": self.severity.value,
            "message": self.message,
            "context": self.context,
            "source": self.source_text,
            "comment": self.disambiguation,
        }


def _positional(template: str) -> set[str]:
    return placeholders_in(template) - {"%n"}


def _issue(entry: MessageEntry, code: str, severity: IssueSeverity, message: str) -> CatalogIssue:
    return CatalogIssue(
        code=code,
        severity=severity,
        message=message,
        context=entry.context,
        source_text=entry.source_text,
        disambiguation=entry.disambiguation,
    )


def _check_entry(entry: MessageEntry) -> list[CatalogIssue]:
    if entry.status is not MessageStatus.TRANSLATED:
        return []

    issues = []
    bodies = entry.numerus_forms if entry.numerus else (entry.translation,)

    if entry.numerus and not entry.numerus_forms:
        issues.append(_issue(entry, "numerus-without-forms", IssueSeverity.ERROR,
                             "numerus message has no plural forms"))
    if not entry.numerus and entry.translation == "" and entry.source_text != "":
        issues.append(_issue(entry, "empty-translation", IssueSeverity.WARNING,
                             "translated message has an empty body"))

    expected = _positional(entry.source_text)
    used: set[str] = set()
    for body in bodies:
        used |= _positional(body)
    extra = sorted(used - expected)
    missing = sorted(expected - used)
    if extra:
        issues.append(_issue(entry, "unknown-placeholder", IssueSeverity.ERROR,
                             f"translation uses {', '.join(extra)} not present in the source"))
    if missing and bodies and any(bodies):
        issues.append(_issue(entry, "missing-placeholder", IssueSeverity.WARNING,
                             f"translation drops {', '.join(missing)}"))
    return issues


def check_catalog(catalog: Catalog) -> list[CatalogIssue]:
    """Run every check against a catalog.

    Returns:
        Issues in document order, duplicate-key conflicts last
    """
    issues: list[CatalogIssue] = []
    for entry in catalog.entries():
        issues.extend(_check_entry(entry))

    index = CatalogIndex.build(catalog, locale=catalog.locale, log_ambiguities=False)
    for diagnostic in index.diagnostics:
        issues.append(CatalogIssue(
            code="duplicate-key",
            severity=IssueSeverity.WARNING,
            message=diagnostic.describe(),
            context=diagnostic.key.context,
            source_text=diagnostic.key.source,
            disambiguation=diagnostic.key.disambiguation,
        ))
    return issues


def catalog_stats(catalog: Catalog) -> dict[str, Any]:
    """Summary counts for a catalog."""
    index = CatalogIndex.build(catalog, locale=catalog.locale, log_ambiguities=False)
    return {
        "source": catalog.source,
        "locale": catalog.locale,
        "version": catalog.version,
        "contexts": len(catalog.contexts),
        "messages": len(catalog),
        "translated": catalog.count(MessageStatus.TRANSLATED),
        "unfinished": catalog.count(MessageStatus.UNFINISHED),
        "obsolete": catalog.count(MessageStatus.OBSOLETE),
        "ambiguities": len(index.diagnostics),
    }

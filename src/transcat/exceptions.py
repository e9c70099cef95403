"""Exceptions and warning categories for the catalog engine.

Errors (raised):
- CatalogError: base class
- ParseError: a catalog document was rejected
- ConfigError: invalid configuration
- ReloadInProgressError: a non-blocking reload found another one running

Warnings (logged and recorded, never raised out of ``translate()``):
- CatalogWarning: base class
- AmbiguousKeyWarning: duplicate lookup key with differing bodies
- PlaceholderMismatch: placeholder index without a matching argument
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog errors."""


class ParseError(CatalogError):
    """A catalog document could not be decoded.

    Attributes:
        reason: Human-readable reason
        source: Path or label of the document
        line: 1-based line of the failure, if known
        column: 0-based column of the failure, if known
    """

    def __init__(
        self,
        reason: str,
        *,
        source: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.reason = reason
        self.source = source
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        where = self.source or "<catalog>"
        if self.line is not None:
            where = f"{where}:{self.line}"
            if self.column is not None:
                where = f"{where}:{self.column}"
        return f"{where}: {self.reason}"

    def with_source(self, source: str) -> "ParseError":
        """Return a copy attributed to ``source``."""
        return ParseError(self.reason, source=source, line=self.line, column=self.column)


class ConfigError(CatalogError):
    """Invalid catalog engine configuration."""


class ReloadInProgressError(CatalogError):
    """Raised when a non-blocking reload is rejected."""


class CatalogWarning(UserWarning):
    """Base category for non-fatal catalog diagnostics."""


class AmbiguousKeyWarning(CatalogWarning):
    """The same lookup key was defined more than once with different bodies."""


class PlaceholderMismatch(CatalogWarning):
    """A placeholder referenced an argument that was not supplied."""

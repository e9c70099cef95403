"""Placeholder substitution.

Templates use positional placeholders ``%1`` .. ``%9`` (1-indexed) and the
escape ``%%`` for a literal percent sign. Numerus bodies may also use
``%n`` for the count.

Substitution is a single left-to-right pass, so argument values are never
scanned for placeholders themselves. A placeholder whose argument was not
supplied stays in the output verbatim and is logged as
``PlaceholderMismatch`` at DEBUG level.

Example:
    formatter = PlaceholderFormatter()
    formatter.format("Đã sao chép %1 trên %2", ["3", "10"])
    # -> "Đã sao chép 3 trên 10"
    formatter.format("100%% complete")
    # -> "100% complete"
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Sequence

from transcat.exceptions import PlaceholderMismatch


logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"%(%|[1-9]|n)")


@dataclass(frozen=True)
class FormatResult:
    """Substituted text plus the placeholder indices left unresolved."""
    text: str
    unresolved: tuple[str, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unresolved


def placeholders_in(template: str) -> set[str]:
    """Placeholder tokens used by a template (``%%`` excluded)."""
    return {
        "%" + match.group(1)
        for match in PLACEHOLDER_PATTERN.finditer(template)
        if match.group(1) != "%"
    }


class PlaceholderFormatter:
    """Substitutes positional arguments into catalog templates."""

    def format_result(
        self,
        template: str,
        args: Sequence[Any] = (),
        count: int | None = None,
    ) -> FormatResult:
        """Substitute arguments and report unresolved placeholders.

        Args:
            template: Text containing ``%1``..``%9``, ``%n`` and ``%%``
            args: Positional arguments; ``%1`` is ``args[0]``
            count: Value for ``%n``; ``%n`` stays literal when None

        Returns:
            FormatResult
        """
        if "%" not in template:
            return FormatResult(template)

        unresolved: list[str] = []

        def replace(match: re.Match[str]) -> str:
            token = match.group(1)
            if token == "%":
                return "%"
            if token == "n":
                if count is None:
                    unresolved.append(match.group(0))
                    return match.group(0)
                return str(count)
            position = int(token)
            if position > len(args):
                unresolved.append(match.group(0))
                return match.group(0)
            return str(args[position - 1])

        text = PLACEHOLDER_PATTERN.sub(replace, template)
        if unresolved:
            logger.debug(
                "%s: %r references %s but only %d argument(s) supplied",
                PlaceholderMismatch.__name__,
                template,
                ", ".join(unresolved),
                len(args),
            )
        return FormatResult(text, tuple(unresolved))

    def format(
        self,
        template: str,
        args: Sequence[Any] = (),
        count: int | None = None,
    ) -> str:
        """Substitute arguments; see ``format_result``."""
        return self.format_result(template, args, count).text

"""Placeholder expansion for resource templates.

Templates mark resource-specific text with ``$UPPER_CASE`` tokens.  The
expander swaps them for the matching form of a :class:`ResourceNameSet`
using an explicit, ordered substitution table.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from crabgen.naming import ResourceNameSet

from .errors import unrecognized_placeholder


# (token, ResourceNameSet field).  Longer tokens win over their prefixes;
# ties keep declaration order.
DEFAULT_PLACEHOLDERS: tuple[tuple[str, str], ...] = (
    ("$MODEL_NAME", "pascal_case"),
    ("$TABLE_NAME", "table_case"),
    ("$FILE_NAME", "snake_case"),
    ("$RAW_NAME", "raw"),
)

_CANDIDATE_RE = re.compile(r"\$[A-Z][A-Z0-9_]*")


class PlaceholderExpander:
    """Expands ``$TOKEN`` placeholders with resource name forms.

    Substitution is a single left-to-right pass: at each offset the first
    matching token in table order wins and replaced text is never rescanned.
    The table is sorted so a token always precedes any shorter token that is
    a prefix of it.
    """

    def __init__(
        self,
        placeholders: Sequence[tuple[str, str]] = DEFAULT_PLACEHOLDERS,
        *,
        strict: bool = False,
    ) -> None:
        if not placeholders:
            raise ValueError("At least one placeholder is required")
        fields = set(ResourceNameSet.model_fields)
        for token, field in placeholders:
            if field not in fields:
                raise ValueError(f"Placeholder {token} maps to unknown field {field!r}")
        self.table = _order_by_precedence(placeholders)
        self.strict = strict
        self._pattern = re.compile("|".join(re.escape(token) for token, _ in self.table))

    @property
    def tokens(self) -> list[str]:
        return [token for token, _ in self.table]

    def expand(self, template: str, names: ResourceNameSet, *, source: str = "") -> str:
        """Return *template* with every known placeholder replaced.

        Args:
            template: Raw template text.
            names: Name forms for the resource being generated.
            source: Optional label (asset path) used in error messages.

        Raises:
            TemplateError: In strict mode, if an unknown ``$TOKEN`` is present.
        """
        if self.strict:
            self.check(template, source=source)
        values = {token: getattr(names, field) for token, field in self.table}
        return self._pattern.sub(lambda m: values[m.group(0)], template)

    def check(self, template: str, *, source: str = "") -> None:
        """Raise ``TemplateError`` for the first ``$TOKEN`` no table entry matches."""
        for match in _CANDIDATE_RE.finditer(template):
            if not any(template.startswith(token, match.start()) for token in self.tokens):
                raise unrecognized_placeholder(match.group(0), source)


def expand(template: str, names: ResourceNameSet, *, strict: bool = False) -> str:
    """Expand *template* with the default placeholder table."""
    return PlaceholderExpander(strict=strict).expand(template, names)


def _order_by_precedence(
    placeholders: Sequence[tuple[str, str]],
) -> tuple[tuple[str, str], ...]:
    # Stable sort: longest first, declaration order among equal lengths.
    return tuple(sorted(placeholders, key=lambda item: -len(item[0])))

"""Naming conventions for generated resources.

Turns a raw, user-supplied resource name into the forms used across the
generated project: a PascalCase type name, a snake_case module/file name and
a pluralised snake_case table name.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict


def pascal(value: str) -> str:
    """Convert ``some-thing``, ``some_thing`` or ``someThing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s]+", snake(value))
    return "".join(word.capitalize() for word in parts if word)


def snake(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", value.strip())
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    s3 = re.sub(r"[^A-Za-z0-9]+", "_", s2)
    return s3.strip("_").lower()


def table(value: str) -> str:
    """Return the pluralised snake_case table name, e.g. ``UserSession`` -> ``user_sessions``."""
    words = snake(value).split("_")
    words[-1] = _pluralize(words[-1])
    return "_".join(words)


_IRREGULAR_PLURALS: dict[str, str] = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
}

_UNCOUNTABLE = frozenset({"data", "equipment", "information", "news", "series", "species"})


def _pluralize(word: str) -> str:
    if not word or word in _UNCOUNTABLE:
        return word
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if word.endswith("y") and word[-2:-1] not in ("a", "e", "i", "o", "u", ""):
        return word[:-1] + "ies"
    if word.endswith(("s", "sh", "ch", "x", "z")):
        return word + "es"
    return word + "s"


class ResourceNameSet(BaseModel):
    """All name forms for one resource, derived once per operation."""

    model_config = ConfigDict(frozen=True)

    raw: str
    pascal_case: str
    snake_case: str
    table_case: str

    @classmethod
    def from_name(cls, raw: str) -> "ResourceNameSet":
        """Derive every form from *raw*; snake and table forms come from the pascal form."""
        pascal_case = pascal(raw)
        if not pascal_case:
            raise ValueError(f"Cannot derive a resource name from {raw!r}")
        return cls(
            raw=raw,
            pascal_case=pascal_case,
            snake_case=snake(pascal_case),
            table_case=table(pascal_case),
        )

    @classmethod
    def from_input(cls, text: str) -> "ResourceNameSet":
        """Build a name set from free text, using its first whitespace-delimited token.

        Raises:
            ValueError: If *text* contains no token.
        """
        tokens = text.split()
        if not tokens:
            raise ValueError("No resource name given")
        return cls.from_name(tokens[0])

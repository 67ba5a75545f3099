"""Append-only registry files (Rust ``mod.rs`` module lists).

A registry file holds one declaration line per entry.  New entries are
appended after the existing content, which is kept verbatim.  Entries are
not deduplicated: registering the same name twice yields two lines, so
callers must only register a resource once.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from .errors import IoError
from .patcher import read_text, write_text_atomic

DECLARATION_PREFIX = "pub mod "
DECLARATION_SUFFIX = ";"

_DECLARATION_RE = re.compile(
    rf"^\s*{re.escape(DECLARATION_PREFIX)}(\w+)\s*{re.escape(DECLARATION_SUFFIX)}\s*$"
)


@dataclass
class RegistryFile:
    """Parsed view of a registry: its path and declared entries in file order."""

    path: Path
    entries: list[str] = field(default_factory=list)

    def __contains__(self, entry: str) -> bool:
        return entry in self.entries


def declaration(entry: str) -> str:
    """Return the declaration line (without terminator) for *entry*."""
    return f"{DECLARATION_PREFIX}{entry}{DECLARATION_SUFFIX}"


def read_registry(registry_path: str | Path) -> RegistryFile:
    """Parse *registry_path*; a missing file is an empty registry."""
    path = Path(registry_path)
    if not path.exists():
        return RegistryFile(path)
    entries = []
    for line in read_text(path).splitlines():
        match = _DECLARATION_RE.match(line)
        if match:
            entries.append(match.group(1))
    return RegistryFile(path, entries)


def register_module(registry_path: str | Path, entry: str) -> Path:
    """Append a ``pub mod <entry>;`` line to *registry_path*.

    Creates the file when missing.  If the existing content does not end in
    a newline, one is inserted before the new declaration.

    Raises:
        IoError: If the registry cannot be read or written.
    """
    if not entry or entry != entry.strip():
        raise ValueError(f"Invalid registry entry {entry!r}")

    path = Path(registry_path)
    content = read_text(path) if path.exists() else ""
    if content and not content.endswith("\n"):
        content += "\n"
    content += declaration(entry) + "\n"

    if not path.parent.is_dir():
        raise IoError(path, "parent directory does not exist")
    write_text_atomic(path, content)
    return path

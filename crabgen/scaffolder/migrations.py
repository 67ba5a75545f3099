"""Sequence-numbered migration directories.

Each migration lives in ``<migrations_root>/<NNNNNNNNNNNNNN>_<slug>/`` with an
``up.sql`` and a ``down.sql``.  The sequence number is the count of existing
subdirectories at call time; it is not stored anywhere, so removing a
migration directory changes the numbers handed out afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from crabgen.naming import snake

from .errors import DirectoryCreationError, IoError

SEQUENCE_WIDTH = 14
UP_FILE = "up.sql"
DOWN_FILE = "down.sql"


@dataclass(frozen=True)
class MigrationDirectory:
    """An allocated migration directory and the SQL written into it."""

    sequence_number: int
    slug: str
    path: Path
    up_content: str = ""
    down_content: str = ""

    @property
    def name(self) -> str:
        return migration_dir_name(self.sequence_number, self.slug)

    @property
    def up_path(self) -> Path:
        return self.path / UP_FILE

    @property
    def down_path(self) -> Path:
        return self.path / DOWN_FILE


@dataclass(frozen=True)
class MigrationRequest:
    """A migration to create once assets and patches are in place."""

    name: str
    up_content: str
    down_content: str


def migration_dir_name(sequence_number: int, slug: str) -> str:
    return f"{sequence_number:0{SEQUENCE_WIDTH}d}_{slug}"


def next_sequence_number(migrations_root: str | Path) -> int:
    """Count the immediate subdirectories of *migrations_root* (0 if it is missing)."""
    root = Path(migrations_root)
    if not root.is_dir():
        return 0
    return sum(1 for child in root.iterdir() if child.is_dir())


def allocate_migration(migrations_root: str | Path, slug: str) -> MigrationDirectory:
    """Create the next migration directory for *slug* under *migrations_root*.

    The root is created when missing.  *slug* is normalised to snake_case.

    Raises:
        DirectoryCreationError: If the directory already exists or cannot be
            created.
    """
    root = Path(migrations_root)
    normalized = snake(slug)
    if not normalized:
        raise ValueError(f"Cannot derive a migration slug from {slug!r}")

    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationError(root, str(exc)) from exc

    number = next_sequence_number(root)
    path = root / migration_dir_name(number, normalized)
    try:
        path.mkdir()
    except FileExistsError as exc:
        raise DirectoryCreationError(path, "already exists") from exc
    except OSError as exc:
        raise DirectoryCreationError(path, str(exc)) from exc

    return MigrationDirectory(sequence_number=number, slug=normalized, path=path)


def create_migration(
    migrations_root: str | Path,
    name: str,
    up_content: str,
    down_content: str,
) -> MigrationDirectory:
    """Allocate a migration directory and write its ``up.sql``/``down.sql``."""
    allocated = allocate_migration(migrations_root, name)
    for target, content in ((allocated.up_path, up_content), (allocated.down_path, down_content)):
        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise IoError(target, str(exc)) from exc

    return MigrationDirectory(
        sequence_number=allocated.sequence_number,
        slug=allocated.slug,
        path=allocated.path,
        up_content=up_content,
        down_content=down_content,
    )

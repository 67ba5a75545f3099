"""Anchored text patching of existing project files.

Files are treated as opaque text: a patch either prepends a block to the
file or replaces the first occurrence of a literal anchor with a block that
still contains the anchor, so later patches can target the same landmark.
"""

from __future__ import annotations

import enum
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from .errors import AnchorNotFound, FileNotFound, IoError


class PatchMode(str, enum.Enum):
    """How a :class:`PatchSpec` changes its target file."""

    PREPEND = "prepend"
    REPLACE_KEEPING_ANCHOR = "replace"


@dataclass(frozen=True)
class PatchSpec:
    """One mutation of an existing file.

    ``target_file`` is relative to the project root unless absolute.  In
    ``REPLACE_KEEPING_ANCHOR`` mode the insertion must contain the anchor.
    """

    target_file: str | Path
    anchor: str
    insertion: str
    mode: PatchMode = PatchMode.REPLACE_KEEPING_ANCHOR

    def __post_init__(self) -> None:
        if self.mode is PatchMode.REPLACE_KEEPING_ANCHOR:
            if not self.anchor:
                raise ValueError("A replace patch needs a non-empty anchor")
            if self.anchor not in self.insertion:
                raise ValueError(
                    f"Insertion for anchor {self.anchor!r} must contain the anchor"
                )

    @classmethod
    def prepend(cls, target_file: str | Path, insertion: str) -> "PatchSpec":
        return cls(target_file, "", insertion, PatchMode.PREPEND)

    @classmethod
    def after_anchor(cls, target_file: str | Path, anchor: str, addition: str) -> "PatchSpec":
        """Keep *anchor* and place *addition* right after it."""
        return cls(target_file, anchor, anchor + addition, PatchMode.REPLACE_KEEPING_ANCHOR)

    def resolve(self, project_dir: str | Path) -> Path:
        return Path(project_dir) / self.target_file

    def describe(self) -> str:
        if self.mode is PatchMode.PREPEND:
            return f"prepend to {self.target_file}"
        return f"patch {self.target_file} at anchor {self.anchor!r}"


def patch(
    file_path: str | Path,
    anchor: str,
    insertion: str,
    mode: PatchMode = PatchMode.REPLACE_KEEPING_ANCHOR,
) -> None:
    """Apply one patch to *file_path* in place.

    Raises:
        FileNotFound: If the file does not exist.
        AnchorNotFound: In replace mode, if *anchor* does not occur.  The file
            is left untouched.
        IoError: If reading or writing fails.
    """
    path = Path(file_path)
    mode = PatchMode(mode)
    content = read_text(path)

    if mode is PatchMode.PREPEND:
        separator = "" if insertion.endswith("\n") else "\n"
        updated = f"{insertion}{separator}{content}"
    else:
        if not anchor:
            raise ValueError("A replace patch needs a non-empty anchor")
        if anchor not in content:
            raise AnchorNotFound(path, anchor)
        # Only the first (lowest offset) occurrence is acted upon.
        updated = content.replace(anchor, insertion, 1)

    write_text_atomic(path, updated)


def apply_patch(spec: PatchSpec, project_dir: str | Path) -> Path:
    """Apply *spec* relative to *project_dir* and return the patched path."""
    path = spec.resolve(project_dir)
    patch(path, spec.anchor, spec.insertion, spec.mode)
    return path


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    """Read *path* as UTF-8, mapping failures onto scaffold errors."""
    if not path.is_file():
        raise FileNotFound(path)
    try:
        # newline="" keeps CRLF files byte-identical after a patch.
        with path.open("r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise IoError(path, str(exc)) from exc


def write_text_atomic(path: Path, content: str) -> None:
    """Replace *path* with *content* via a sibling temp file and ``os.replace``.

    Either the new content becomes visible in full or the previous file is
    left as it was.
    """
    tmp_name: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as fh:
            tmp_name = fh.name
            fh.write(content)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise IoError(path, str(exc)) from exc

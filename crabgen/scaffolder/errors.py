"""Exceptions raised by the scaffolding engine.

Every failure carries the path (and, where relevant, the anchor or asset)
that caused it so a partially modified project can be repaired by hand.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class AssetNotFound(ScaffoldError):
    """Raised when the template store has no asset at a logical path."""

    def __init__(self, logical_path: str) -> None:
        self.logical_path = logical_path
        super().__init__(f"Template asset not found: {logical_path}")


class TemplateError(ScaffoldError):
    """Raised when a template cannot be expanded or rendered.

    In strict placeholder mode ``token`` holds the unrecognized placeholder.
    """

    def __init__(self, message: str, *, token: str = "", source: str = "") -> None:
        self.token = token
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"{message}{where}")


def unrecognized_placeholder(token: str, source: str = "") -> TemplateError:
    return TemplateError(f"Unrecognized placeholder {token}", token=token, source=source)


class FileNotFound(ScaffoldError):
    """Raised when a file that must be patched does not exist."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class AnchorNotFound(ScaffoldError):
    """Raised when a patch anchor does not occur in the target file."""

    def __init__(self, path: str | Path, anchor: str) -> None:
        self.path = Path(path)
        self.anchor = anchor
        super().__init__(f"Anchor {anchor!r} not found in {self.path}")


class IoError(ScaffoldError):
    """Raised when reading or writing a file fails."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"I/O error on {self.path}: {reason}")


class DirectoryCreationError(ScaffoldError):
    """Raised when a migration directory cannot be created."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot create directory {self.path}: {reason}")


class UnsupportedOption(ScaffoldError):
    """Raised when a requested framework/ORM/plugin combination is not available."""


class CommandError(ScaffoldError):
    """Raised when an external command (cargo, git) exits non-zero."""

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr}" if stderr else ""
        super().__init__(f"Failed to execute `{command}` (exit {returncode}){detail}")


class MaterializeError(ScaffoldError):
    """Raised by the materializer; names the failing step and target.

    The original error is available as ``__cause__`` and ``cause``.
    """

    def __init__(self, step: str, target: str | Path, cause: ScaffoldError) -> None:
        self.step = step
        self.target = str(target)
        self.cause = cause
        super().__init__(f"{step} failed for {self.target}: {cause}")

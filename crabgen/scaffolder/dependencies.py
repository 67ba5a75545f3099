"""Cargo dependency table editing.

Upserts entries in the ``[dependencies]`` table of a project's
``Cargo.toml`` with ``tomlkit`` so comments, ordering and formatting of the
rest of the manifest survive the edit.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import FileNotFound, IoError
from .patcher import read_text, write_text_atomic

DependencySpec = str | dict[str, Any]


def add_dependency(cargo_path: str | Path, name: str, version: DependencySpec) -> Path:
    """Insert or replace ``dependencies.<name>`` in *cargo_path*.

    Args:
        cargo_path: Path to ``Cargo.toml``.
        name: Crate name.
        version: A version string (``"1.0"``) or a table such as
            ``{"version": "1.0", "features": ["derive"]}``, written inline.

    Raises:
        FileNotFound: If the manifest does not exist.
        IoError: If it cannot be parsed, read or written.
    """
    return add_dependencies(cargo_path, {name: version})


def add_dependencies(cargo_path: str | Path, dependencies: dict[str, DependencySpec]) -> Path:
    """Upsert several dependencies with a single read/write of the manifest."""
    path = Path(cargo_path)
    try:
        document = tomlkit.parse(read_text(path))
    except TOMLKitError as exc:
        raise IoError(path, f"invalid TOML: {exc}") from exc

    table = document.get("dependencies")
    if table is None:
        table = tomlkit.table()
        document["dependencies"] = table

    for name, version in dependencies.items():
        table[name] = _to_item(version)

    write_text_atomic(path, tomlkit.dumps(document))
    return path


def read_dependencies(cargo_path: str | Path) -> dict[str, Any]:
    """Return the ``[dependencies]`` table as plain Python values."""
    path = Path(cargo_path)
    if not path.is_file():
        raise FileNotFound(path)
    try:
        document = tomlkit.parse(read_text(path))
    except TOMLKitError as exc:
        raise IoError(path, f"invalid TOML: {exc}") from exc
    return document.get("dependencies", tomlkit.table()).unwrap()


def _to_item(version: DependencySpec) -> Any:
    if isinstance(version, str):
        return version
    inline = tomlkit.inline_table()
    inline.update(version)
    return inline


def set_binary_target(cargo_path: str | Path, name: str, path: str) -> Path:
    """Point the package's ``[[bin]]`` target called *name* at *path*.

    An existing target with the same name is updated in place; otherwise a
    new ``[[bin]]`` entry is appended.
    """
    manifest = Path(cargo_path)
    try:
        document = tomlkit.parse(read_text(manifest))
    except TOMLKitError as exc:
        raise IoError(manifest, f"invalid TOML: {exc}") from exc

    bins = document.get("bin")
    if bins is None:
        bins = tomlkit.aot()
        document["bin"] = bins
    for target in bins:
        if target.get("name") == name:
            target["path"] = path
            break
    else:
        entry = tomlkit.table()
        entry["name"] = name
        entry["path"] = path
        bins.append(entry)

    write_text_atomic(manifest, tomlkit.dumps(document))
    return manifest

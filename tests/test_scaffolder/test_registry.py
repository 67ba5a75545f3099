"""Tests for crabgen.scaffolder.registry.

Covers:
- Appending declarations to new and existing registry files
- Newline handling for content without a trailing newline
- No deduplication on repeated registration
- Parsing registries back into entries
"""

from __future__ import annotations

from pathlib import Path

import pytest

from crabgen.scaffolder.errors import IoError
from crabgen.scaffolder.registry import declaration, read_registry, register_module

pytestmark = pytest.mark.unit


class TestRegisterModule:
    def test_creates_missing_file(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        register_module(registry, "post")
        assert registry.read_text(encoding="utf-8") == "pub mod post;\n"

    def test_appends_after_existing_content(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        registry.write_text("pub type ID = i32;\n", encoding="utf-8")
        register_module(registry, "post")
        assert registry.read_text(encoding="utf-8") == "pub type ID = i32;\npub mod post;\n"

    def test_inserts_newline_when_missing(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        registry.write_text("pub mod user;", encoding="utf-8")
        register_module(registry, "post")
        assert registry.read_text(encoding="utf-8") == "pub mod user;\npub mod post;\n"

    def test_registering_twice_adds_two_lines(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        register_module(registry, "foo")
        register_module(registry, "foo")
        lines = registry.read_text(encoding="utf-8").splitlines()
        assert lines == ["pub mod foo;", "pub mod foo;"]

    def test_preserves_order(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        for entry in ("b", "a", "c"):
            register_module(registry, entry)
        assert read_registry(registry).entries == ["b", "a", "c"]

    @pytest.mark.parametrize("entry", ["", " post", "post\n"])
    def test_invalid_entry(self, tmp_path: Path, entry: str) -> None:
        with pytest.raises(ValueError):
            register_module(tmp_path / "mod.rs", entry)

    def test_missing_parent_directory(self, tmp_path: Path) -> None:
        with pytest.raises(IoError, match="parent directory does not exist"):
            register_module(tmp_path / "missing" / "mod.rs", "post")


class TestReadRegistry:
    def test_missing_file_is_empty(self, tmp_path: Path) -> None:
        registry = read_registry(tmp_path / "mod.rs")
        assert registry.entries == []
        assert "post" not in registry

    def test_ignores_non_declarations(self, tmp_path: Path) -> None:
        registry = tmp_path / "mod.rs"
        registry.write_text(
            "// generated\nuse serde::Serialize;\npub mod post;\n  pub mod user ;\n",
            encoding="utf-8",
        )
        parsed = read_registry(registry)
        assert parsed.entries == ["post", "user"]
        assert "user" in parsed

    def test_declaration(self) -> None:
        assert declaration("post") == "pub mod post;"

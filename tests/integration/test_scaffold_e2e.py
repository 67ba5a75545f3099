"""Integration tests for the create -> resource -> plugin workflow.

These tests drive :class:`ProjectGenerator` through the same sequence a user
would run on the command line, against the embedded templates.  ``cargo``
and ``git`` are replaced by the ``fake_runner`` fixture, so no Rust
toolchain is required.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from crabgen.config import BackendDatabase, BackendFramework, Config
from crabgen.generator import ProjectGenerator
from crabgen.scaffolder.errors import MaterializeError
from crabgen.scaffolder.registry import read_registry

pytestmark = pytest.mark.integration


def _generator(root: Path, runner, **kwargs) -> ProjectGenerator:
    return ProjectGenerator(Config(project_dir=root, **kwargs), runner=runner)


@pytest.mark.parametrize(
    "framework, marker",
    [
        (BackendFramework.ACTIX_WEB, '.service(services::post::endpoints(web::scope("/posts")))'),
        (BackendFramework.POEM, 'api_routes.nest("/posts", services::post::api());'),
    ],
)
def test_full_workflow(
    tmp_path: Path, fake_runner, framework: BackendFramework, marker: str
) -> None:
    root = tmp_path / "shop"
    _generator(root, fake_runner, backend_framework=framework).create_project()

    # Later commands reload the saved settings, as the CLI does.
    generator = ProjectGenerator(Config.for_project(root), runner=fake_runner)
    generator.create_resource("post")
    generator.install_plugin("auth")

    main = (root / "backend" / "main.rs").read_text(encoding="utf-8")
    assert marker in main
    assert "create_rust_app::auth" in main

    assert read_registry(root / "backend" / "models" / "mod.rs").entries == ["post"]
    assert read_registry(root / "backend" / "services" / "mod.rs").entries == ["post"]

    migrations = sorted(p.name for p in (root / "migrations").iterdir())
    assert migrations == ["00000000000000_diesel_initial_setup", "00000000000001_plugin_auth"]

    app = (root / "frontend" / "src" / "App.tsx").read_text(encoding="utf-8")
    assert "LoginPage" in app
    assert "{/* CRA: routes */}" in app


def test_sqlite_auth_migration(tmp_path: Path, fake_runner) -> None:
    root = tmp_path / "lite"
    generator = _generator(root, fake_runner, backend_database=BackendDatabase.SQLITE)
    generator.create_project()
    result = generator.install_plugin("auth")
    up = result.migrations[0].up_path.read_text(encoding="utf-8")
    assert "AUTOINCREMENT" in up


def test_installing_auth_twice_repeats_changes(
    tmp_path: Path, fake_runner
) -> None:
    root = tmp_path / "twice"
    generator = _generator(root, fake_runner)
    generator.create_project()
    generator.install_plugin("auth")
    generator.install_plugin("auth")

    # Patches are not idempotent: the second install inserts its routes again
    # and allocates a new migration number.
    app = (root / "frontend" / "src" / "App.tsx").read_text(encoding="utf-8")
    assert app.count('<Route path="/login"') == 2
    assert (root / "migrations" / "00000000000002_plugin_auth").is_dir()


def test_resource_in_damaged_project_keeps_partial_output(tmp_path: Path, fake_runner) -> None:
    root = tmp_path / "damaged"
    generator = _generator(root, fake_runner)
    generator.create_project()
    main = root / "backend" / "main.rs"
    main.write_text("fn main() {}\n", encoding="utf-8")

    with pytest.raises(MaterializeError) as exc_info:
        generator.create_resource("post")

    assert exc_info.value.target == str(main)
    assert (root / "backend" / "models" / "post.rs").exists()
    assert (root / "backend" / "services" / "post.rs").exists()
    assert read_registry(root / "backend" / "models" / "mod.rs").entries == []

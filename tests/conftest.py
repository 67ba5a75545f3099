"""Shared pytest fixtures for the crabgen test suite.

Provides reusable fixtures for:
- Temporary project directories
- Resource name sets
- In-memory template stores
- A scaffolded actix-web / poem project with the anchors generators patch
- A fake command runner standing in for cargo and git
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from crabgen.config import BackendFramework, Config
from crabgen.naming import ResourceNameSet
from crabgen.scaffolder.templates import TemplateStore

# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_project_dir(tmp_path: Path) -> Path:
    """Temporary directory for generated projects (auto-cleanup)."""
    project_dir = tmp_path / "test-project"
    project_dir.mkdir()
    yield project_dir


# ---------------------------------------------------------------------------
# Names & templates
# ---------------------------------------------------------------------------


@pytest.fixture
def post_names() -> ResourceNameSet:
    return ResourceNameSet.from_name("Post")


@pytest.fixture
def user_session_names() -> ResourceNameSet:
    return ResourceNameSet.from_name("user_session")


@pytest.fixture
def fake_store() -> TemplateStore:
    """A small in-memory store with resource and plugin style assets."""
    return TemplateStore.from_mapping(
        {
            "resource/model.rs": "pub struct $MODEL_NAME {}\npub struct $MODEL_NAMEChangeset {}\n",
            "resource/service.rs": "use crate::models::$FILE_NAME::$MODEL_NAME;\n",
            "plugin_demo/frontend/src/Demo.tsx": "export const Demo = () => null\n",
            "plugin_demo/README.md.j2": "# {{ project_name }} ({{ pascal_case }})\n",
        }
    )


# ---------------------------------------------------------------------------
# Scaffolded project fixtures
# ---------------------------------------------------------------------------

ACTIX_MAIN = """\
use actix_web::{web, App, HttpServer};

mod models;
mod services;

#[actix_web::main]
async fn main() -> std::io::Result<()> {
    HttpServer::new(move || {
        App::new()
            .service(
                web::scope("/api")
            )
    })
    .bind("127.0.0.1:8080")?
    .run()
    .await
}
"""

POEM_MAIN = """\
use poem::{Route, Server};

#[tokio::main]
async fn main() -> Result<(), std::io::Error> {
    let mut api_routes = Route::new();

    let app = Route::new().nest("/api", api_routes);
    Server::new(TcpListener::bind("127.0.0.1:8080")).run(app).await
}
"""

APP_TSX = """\
import React from 'react'

const App = () => {
  const navigate = useNavigate()

  return (
    <div>
      <div>
        {/* CRA: left-aligned nav buttons */}
      </div>
      <div>
        {/* CRA: right-aligned nav buttons */}
      </div>
      <Routes>
        {/* CRA: routes */}
        <Route path="/" element={<Home />} />
      </Routes>
    </div>
  )
}

export default App
"""

INDEX_TSX = """\
import React from 'react'

root.render(
  <React.StrictMode>
    {/* CRA: Wrap */}
    <App />
    {/* CRA: Unwrap */}
  </React.StrictMode>,
)
"""


def _write_files(root: Path, files: dict[str, str]) -> None:
    for rel_path, content in files.items():
        file_path = root / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")


@pytest.fixture
def actix_project(tmp_project_dir: Path) -> Path:
    """A minimal actix-web project containing every anchor crabgen patches."""
    _write_files(
        tmp_project_dir,
        {
            "backend/main.rs": ACTIX_MAIN,
            "backend/models/mod.rs": "pub type ID = i32;\n",
            "backend/services/mod.rs": "",
            "frontend/src/App.tsx": APP_TSX,
            "frontend/bundles/index.tsx": INDEX_TSX,
            "migrations/00000000000000_diesel_initial_setup/up.sql": "-- setup\n",
            "migrations/00000000000000_diesel_initial_setup/down.sql": "-- teardown\n",
            "Cargo.toml": '[package]\nname = "test_project"\n\n[dependencies]\n',
        },
    )
    return tmp_project_dir


@pytest.fixture
def poem_project(tmp_project_dir: Path) -> Path:
    """Same as ``actix_project`` but with a poem entry point."""
    _write_files(
        tmp_project_dir,
        {
            "backend/main.rs": POEM_MAIN,
            "backend/models/mod.rs": "",
            "backend/services/mod.rs": "",
            "frontend/src/App.tsx": APP_TSX,
            "frontend/bundles/index.tsx": INDEX_TSX,
        },
    )
    return tmp_project_dir


@pytest.fixture
def actix_config(actix_project: Path) -> Config:
    return Config(project_dir=actix_project)


@pytest.fixture
def poem_config(poem_project: Path) -> Config:
    return Config(project_dir=poem_project, backend_framework=BackendFramework.POEM)


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


class FakeRunner:
    """Records commands; ``cargo init`` writes a manifest like the real one."""

    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[list[str]] = []
        self.fail_on = fail_on

    def __call__(self, cmd: list[str], cwd: Any = None, **kwargs: Any) -> tuple[int, str, str]:
        self.calls.append(list(cmd))
        command = " ".join(cmd)
        if self.fail_on and command.startswith(self.fail_on):
            return (1, "", f"{cmd[0]}: simulated failure")
        if cmd[:2] == ["cargo", "init"]:
            name = cmd[cmd.index("--name") + 1] if "--name" in cmd else "app"
            (Path(cwd) / "Cargo.toml").write_text(
                f'[package]\nname = "{name}"\nversion = "0.1.0"\nedition = "2021"\n\n'
                "# See more keys at https://doc.rust-lang.org/cargo/reference/manifest.html\n\n"
                "[dependencies]\n",
                encoding="utf-8",
            )
        return (0, "", "")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()

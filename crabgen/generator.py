"""Top-level generator operations.

:class:`ProjectGenerator` implements the three commands crabgen offers:

- ``create_project`` -- ``cargo init``, default dependencies, the project
  template tree, and an initial git commit.
- ``create_resource`` -- a Diesel model and a backend service for one
  resource, declared in the module registries and mounted under ``/api``.
- ``install_plugin`` -- a named plugin (see :mod:`crabgen.plugins`).

Each command is a single :meth:`ProjectMaterializer.materialize` call against
``config.project_dir``.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from crabgen.config import BackendDatabase, BackendFramework, BackendOrm, Config
from crabgen.content.model import model_asset, model_registration
from crabgen.content.service import route_registration, service_asset, service_registration
from crabgen.naming import ResourceNameSet
from crabgen.plugins import InstallConfig, get_plugin
from crabgen.scaffolder.dependencies import DependencySpec, add_dependencies, set_binary_target
from crabgen.scaffolder.errors import CommandError, IoError, ScaffoldError, UnsupportedOption
from crabgen.scaffolder.materializer import MaterializeResult, ProjectMaterializer
from crabgen.scaffolder.placeholders import PlaceholderExpander
from crabgen.scaffolder.templates import TemplateRenderer, TemplateStore
from crabgen.utils import (
    command_msg,
    dependency_msg,
    ensure_dir,
    is_empty_dir,
    message,
    run_command,
)

CommandRunner = Callable[..., tuple[int, str, str]]


# ---------------------------------------------------------------------------
# Default Cargo dependencies for new projects
# ---------------------------------------------------------------------------

BASE_DEPENDENCIES: dict[str, DependencySpec] = {
    "anyhow": "1.0",
    "chrono": {"version": "0.4", "features": ["serde"]},
    "derive_more": "0.99",
    "dotenv": "0.15",
    "env_logger": "0.10",
    "futures-util": "0.3",
    "jsonwebtoken": "8.2",
    "serde": {"version": "1.0", "features": ["derive"]},
    "serde_json": "1.0",
    "tsync": "1.2",
    "uuid": {"version": "1.2", "features": ["serde", "v4"]},
}

FRAMEWORK_DEPENDENCIES: dict[BackendFramework, dict[str, DependencySpec]] = {
    BackendFramework.ACTIX_WEB: {
        "actix-files": "0.6",
        "actix-http": "3.2",
        "actix-web": "4.2",
    },
    BackendFramework.POEM: {
        "poem": {"version": "1.3", "features": ["static-files"]},
        "tokio": {"version": "1.24", "features": ["full"]},
    },
}

DATABASE_DEPENDENCIES: dict[BackendDatabase, dict[str, DependencySpec]] = {
    BackendDatabase.POSTGRES: {
        "diesel": {
            "version": "2.0",
            "features": ["postgres", "r2d2", "chrono"],
            "default-features": False,
        },
    },
    BackendDatabase.SQLITE: {
        "diesel": {
            "version": "2.0",
            "features": ["sqlite", "r2d2", "chrono"],
            "default-features": False,
        },
        "libsqlite3-sys": {"version": "0.25", "features": ["bundled"]},
    },
}

DIESEL_CONNECTIONS: dict[BackendDatabase, str] = {
    BackendDatabase.POSTGRES: "PgConnection",
    BackendDatabase.SQLITE: "SqliteConnection",
}

TEMPLATE_DIRS: dict[BackendFramework, str] = {
    BackendFramework.ACTIX_WEB: "project/actix_web",
    BackendFramework.POEM: "project/poem",
}

# SQLite needs no initial setup migration, so it has no template directory.
DATABASE_TEMPLATE_DIRS: dict[BackendDatabase, str] = {
    BackendDatabase.POSTGRES: "project/postgres",
}

GIT_STEPS: list[list[str]] = [
    ["git", "init"],
    ["git", "add", "-A"],
    ["git", "commit", "-m", "Initial commit"],
    ["git", "branch", "-M", "main"],
]


class ProjectGenerator:
    """Runs generator commands against ``config.project_dir``.

    Args:
        config: Project location, backend options and file layout.
        store: Template source; defaults to the templates shipped with crabgen.
        runner: Executes external commands, ``run_command`` by default.
    """

    def __init__(
        self,
        config: Config,
        store: TemplateStore | None = None,
        runner: CommandRunner = run_command,
    ) -> None:
        self.config = config
        self.store = store or TemplateStore()
        self.runner = runner
        self.materializer = ProjectMaterializer(
            config.project_dir,
            expander=PlaceholderExpander(strict=config.strict_placeholders),
            renderer=TemplateRenderer(self.store),
            migrations_dir=config.layout.migrations_dir,
        )

    @property
    def project_dir(self) -> Path:
        return self.config.project_dir

    # -- Public API --------------------------------------------------------

    def create_project(self) -> MaterializeResult:
        """Create a new project at ``config.project_dir``.

        Raises:
            ScaffoldError: If the directory exists and is not empty.
            IoError: If the project directory or saved settings cannot be written.
            CommandError: If ``cargo`` or ``git`` fails.
            MaterializeError: If writing the template tree fails.
        """
        root = self.project_dir
        if root.exists() and not is_empty_dir(root):
            raise ScaffoldError(f"Directory already exists and is not empty: {root}")

        project_name = root.resolve().name
        names = ResourceNameSet.from_name(project_name)
        message(f"Creating project {project_name}")
        try:
            ensure_dir(root)
        except OSError as exc:
            raise IoError(root, str(exc)) from exc

        self._run(["cargo", "init", "--name", names.snake_case])

        dependencies = {
            **BASE_DEPENDENCIES,
            **DATABASE_DEPENDENCIES[self.config.backend_database],
            **FRAMEWORK_DEPENDENCIES[self.config.backend_framework],
        }
        add_dependencies(self.config.cargo_path, dependencies)
        for name in dependencies:
            dependency_msg(name)
        set_binary_target(self.config.cargo_path, names.snake_case, self.config.layout.main_file)

        assets = self.store.assets("project/base") + self.store.assets(
            TEMPLATE_DIRS[self.config.backend_framework]
        )
        database_dir = DATABASE_TEMPLATE_DIRS.get(self.config.backend_database)
        if database_dir:
            assets += self.store.assets(database_dir)
        result = self.materializer.materialize(
            names, assets, context=self._project_context(project_name)
        )

        try:
            self.config.save()
        except OSError as exc:
            raise IoError(self.config.config_path, str(exc)) from exc
        for step in GIT_STEPS:
            self._run(step)
        return result

    def create_resource(self, name: str) -> MaterializeResult:
        """Add a model and service for resource *name* and mount it under ``/api``.

        Only the first whitespace-delimited token of *name* is used.
        """
        if self.config.backend_orm is not BackendOrm.DIESEL:
            raise UnsupportedOption(
                f"Resource generation for the {self.config.backend_orm.value} ORM is not supported"
            )
        names = ResourceNameSet.from_input(name)
        layout = self.config.layout
        framework = self.config.backend_framework
        message(f"Creating resource '{names.pascal_case}'")

        return self.materializer.materialize(
            names,
            assets=[
                model_asset(self.store, layout),
                service_asset(self.store, layout, framework),
            ],
            patches=[route_registration(framework, layout.main_file, names)],
            registrations=[
                model_registration(layout, names),
                service_registration(layout, names),
            ],
        )

    def install_plugin(self, name: str) -> MaterializeResult:
        """Install the plugin called *name*."""
        plugin = get_plugin(name)
        message(f"Installing plugin {plugin.name}")
        return plugin.install(
            InstallConfig.from_config(self.config), self.store, self.materializer
        )

    # -- Internals ---------------------------------------------------------

    def _project_context(self, project_name: str) -> dict[str, Any]:
        return {
            "project_name": project_name,
            "backend_framework": self.config.backend_framework.value,
            "backend_database": self.config.backend_database.value,
            "diesel_connection": DIESEL_CONNECTIONS[self.config.backend_database],
        }

    def _run(self, cmd: list[str]) -> None:
        command = " ".join(cmd)
        command_msg(command)
        returncode, _, stderr = self.runner(cmd, cwd=self.project_dir)
        if returncode != 0:
            raise CommandError(command, returncode, stderr)

"""crabgen configuration.

Centralised, typed configuration for the generator.  All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
Every project path is relative to ``project_dir``; nothing depends on the
current working directory.
"""

from __future__ import annotations

import enum
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class BackendFramework(str, enum.Enum):
    ACTIX_WEB = "actix-web"
    POEM = "poem"


class BackendDatabase(str, enum.Enum):
    POSTGRES = "postgres"
    SQLITE = "sqlite"


class BackendOrm(str, enum.Enum):
    DIESEL = "diesel"
    PRISMA = "prisma"


class LayoutConfig(BaseModel):
    """Where generated files live inside a project (all project-relative)."""

    models_dir: str = Field(default="backend/models")
    services_dir: str = Field(default="backend/services")
    migrations_dir: str = Field(default="migrations")
    main_file: str = Field(default="backend/main.rs")
    app_file: str = Field(default="frontend/src/App.tsx")
    bundle_file: str = Field(default="frontend/bundles/index.tsx")
    cargo_file: str = Field(default="Cargo.toml")

    @property
    def models_registry(self) -> str:
        return f"{self.models_dir}/mod.rs"

    @property
    def services_registry(self) -> str:
        return f"{self.services_dir}/mod.rs"


class Config(BaseModel):
    """Global crabgen configuration.

    Instances are typically created once by the CLI entry point and then
    passed to :class:`~crabgen.generator.ProjectGenerator`.
    """

    project_dir: Path = Field(default=Path("."))
    backend_framework: BackendFramework = Field(default=BackendFramework.ACTIX_WEB)
    backend_database: BackendDatabase = Field(default=BackendDatabase.POSTGRES)
    backend_orm: BackendOrm = Field(default=BackendOrm.DIESEL)
    strict_placeholders: bool = Field(
        default=False, description="Fail on unknown $PLACEHOLDER tokens instead of keeping them"
    )
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def main_path(self) -> Path:
        """Backend entry point that route registrations patch."""
        return self.project_dir / self.layout.main_file

    @property
    def cargo_path(self) -> Path:
        return self.project_dir / self.layout.cargo_file

    @property
    def migrations_path(self) -> Path:
        return self.project_dir / self.layout.migrations_dir

    @property
    def config_path(self) -> Path:
        """Default location of a saved configuration inside the project."""
        return self.project_dir / ".crabgen.json"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file. Defaults to ``<project_dir>/.crabgen.json``.

        Returns:
            The path where the file was written.
        """
        target = path or self.config_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            self.model_dump_json(indent=2, exclude={"project_dir"}), encoding="utf-8"
        )
        return target

    @classmethod
    def load(cls, path: Path, project_dir: Path | None = None) -> "Config":
        """Load a previously-saved configuration from JSON.

        ``project_dir`` is not stored in the file; it defaults to the file's
        directory.
        """
        path = Path(path)
        config = cls.model_validate_json(path.read_text(encoding="utf-8"))
        config.project_dir = project_dir if project_dir is not None else path.parent
        return config

    @classmethod
    def for_project(cls, project_dir: Path, **overrides: Any) -> "Config":
        """Load ``<project_dir>/.crabgen.json`` when present, else use defaults.

        Keyword overrides that are not ``None`` win over both.
        """
        saved = Path(project_dir) / ".crabgen.json"
        base = cls.load(saved, project_dir) if saved.is_file() else cls(project_dir=project_dir)
        updates = {k: v for k, v in overrides.items() if v is not None}
        return base.model_copy(update=updates) if updates else base

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            CRABGEN_PROJECT_DIR, CRABGEN_FRAMEWORK, CRABGEN_DATABASE,
            CRABGEN_ORM, CRABGEN_STRICT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CRABGEN_PROJECT_DIR"):
            kwargs["project_dir"] = Path(os.environ["CRABGEN_PROJECT_DIR"])
        if os.environ.get("CRABGEN_FRAMEWORK"):
            kwargs["backend_framework"] = BackendFramework(os.environ["CRABGEN_FRAMEWORK"])
        if os.environ.get("CRABGEN_DATABASE"):
            kwargs["backend_database"] = BackendDatabase(os.environ["CRABGEN_DATABASE"])
        if os.environ.get("CRABGEN_ORM"):
            kwargs["backend_orm"] = BackendOrm(os.environ["CRABGEN_ORM"])
        strict = os.environ.get("CRABGEN_STRICT", "").strip().lower()
        if strict:
            kwargs["strict_placeholders"] = strict in ("1", "true", "yes", "on")
        return cls(**kwargs)

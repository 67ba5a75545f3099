"""Plugin interface.

A plugin describes what it adds to a project as a :class:`PluginPlan`
(assets, patches, registrations, migrations).  Building the plan touches no
files, so unsupported option combinations are rejected before anything is
written; :meth:`Plugin.install` then hands the plan to the materializer.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field

from crabgen.config import BackendDatabase, BackendFramework, BackendOrm, Config, LayoutConfig
from crabgen.naming import ResourceNameSet
from crabgen.scaffolder.materializer import MaterializeResult, ProjectMaterializer, Registration
from crabgen.scaffolder.migrations import MigrationRequest
from crabgen.scaffolder.patcher import PatchSpec
from crabgen.scaffolder.templates import TemplateAsset, TemplateStore


class InstallConfig(BaseModel):
    """The project options a plugin needs to know about."""

    project_dir: Path
    backend_framework: BackendFramework = Field(default=BackendFramework.ACTIX_WEB)
    backend_database: BackendDatabase = Field(default=BackendDatabase.POSTGRES)
    backend_orm: BackendOrm = Field(default=BackendOrm.DIESEL)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)

    @classmethod
    def from_config(cls, config: Config) -> "InstallConfig":
        return cls(
            project_dir=config.project_dir,
            backend_framework=config.backend_framework,
            backend_database=config.backend_database,
            backend_orm=config.backend_orm,
            layout=config.layout,
        )


@dataclass
class PluginPlan:
    assets: list[TemplateAsset] = field(default_factory=list)
    patches: list[PatchSpec] = field(default_factory=list)
    registrations: list[Registration] = field(default_factory=list)
    migrations: list[MigrationRequest] = field(default_factory=list)


class Plugin(abc.ABC):
    """Base class for installable plugins."""

    #: Name used on the command line; also the resource name for placeholders.
    name: str = ""

    @abc.abstractmethod
    def plan(self, config: InstallConfig, store: TemplateStore) -> PluginPlan:
        """Describe the changes this plugin makes to the project."""

    def install(
        self,
        config: InstallConfig,
        store: TemplateStore,
        materializer: ProjectMaterializer,
    ) -> MaterializeResult:
        plan = self.plan(config, store)
        return materializer.materialize(
            ResourceNameSet.from_name(self.name),
            plan.assets,
            plan.patches,
            plan.registrations,
            plan.migrations,
        )

"""crabgen scaffolding engine -- writes and patches project files.

The engine expands ``$PLACEHOLDER`` templates for a resource, writes them
into a project, patches existing files at literal anchors, appends module
declarations to registry files and allocates numbered migration
directories.

Quick usage::

    from crabgen.naming import ResourceNameSet
    from crabgen.scaffolder import PatchSpec, ProjectMaterializer, TemplateStore

    store = TemplateStore()
    materializer = ProjectMaterializer("/path/to/project")
    materializer.materialize(
        ResourceNameSet.from_input("post"),
        assets=[...],
        patches=[PatchSpec.after_anchor("backend/main.rs", 'web::scope("/api")', "...")],
    )
"""

from crabgen.scaffolder.errors import (
    AnchorNotFound,
    AssetNotFound,
    DirectoryCreationError,
    FileNotFound,
    IoError,
    MaterializeError,
    ScaffoldError,
    TemplateError,
)
from crabgen.scaffolder.materializer import MaterializeResult, ProjectMaterializer, Registration
from crabgen.scaffolder.migrations import MigrationDirectory, allocate_migration, create_migration
from crabgen.scaffolder.patcher import PatchMode, PatchSpec, patch
from crabgen.scaffolder.placeholders import PlaceholderExpander, expand
from crabgen.scaffolder.registry import RegistryFile, read_registry, register_module
from crabgen.scaffolder.templates import TemplateAsset, TemplateRenderer, TemplateStore

__all__ = [
    "AnchorNotFound",
    "AssetNotFound",
    "DirectoryCreationError",
    "FileNotFound",
    "IoError",
    "MaterializeError",
    "MaterializeResult",
    "MigrationDirectory",
    "PatchMode",
    "PatchSpec",
    "PlaceholderExpander",
    "ProjectMaterializer",
    "Registration",
    "RegistryFile",
    "ScaffoldError",
    "TemplateAsset",
    "TemplateError",
    "TemplateRenderer",
    "TemplateStore",
    "allocate_migration",
    "create_migration",
    "expand",
    "patch",
    "read_registry",
    "register_module",
]

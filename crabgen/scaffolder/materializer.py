"""Writes template assets into a project and applies follow-up edits.

One :meth:`ProjectMaterializer.materialize` call corresponds to one
"create project", "add resource" or "install plugin" operation.  Steps run in
a fixed order (assets, patches, registrations, migrations) and stop at the
first failure.  Nothing is rolled back: whatever was written before the
failure stays on disk and the raised :class:`MaterializeError` names the
step and file that failed.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jinja2

from crabgen.naming import ResourceNameSet
from crabgen.utils import ensure_dir, file_msg, patch_msg, register_msg

from .errors import IoError, MaterializeError, ScaffoldError, TemplateError
from .migrations import MigrationDirectory, MigrationRequest, create_migration
from .patcher import PatchSpec, apply_patch
from .placeholders import PlaceholderExpander
from .registry import register_module
from .templates import TemplateAsset, TemplateRenderer, strip_jinja_suffix


@dataclass(frozen=True)
class Registration:
    """Append ``entry`` to the registry file at ``registry_path`` (project relative)."""

    registry_path: str | Path
    entry: str


@dataclass
class MaterializeResult:
    """Everything one materialize call changed, in the order it happened."""

    written: list[Path] = field(default_factory=list)
    patched: list[Path] = field(default_factory=list)
    registered: list[tuple[Path, str]] = field(default_factory=list)
    migrations: list[MigrationDirectory] = field(default_factory=list)


class ProjectMaterializer:
    """Applies assets, patches and registrations to one project directory.

    Every path handed to :meth:`materialize` is resolved against
    ``project_dir``; the current working directory is never consulted.
    """

    def __init__(
        self,
        project_dir: str | Path,
        expander: PlaceholderExpander | None = None,
        renderer: TemplateRenderer | None = None,
        migrations_dir: str | Path = "migrations",
        *,
        verbose: bool = True,
    ) -> None:
        self.project_dir = Path(project_dir)
        self.expander = expander or PlaceholderExpander()
        self.renderer = renderer or TemplateRenderer()
        self.migrations_dir = Path(migrations_dir)
        self.verbose = verbose

    # -- Public API --------------------------------------------------------

    def materialize(
        self,
        names: ResourceNameSet,
        assets: Sequence[TemplateAsset],
        patches: Sequence[PatchSpec] = (),
        registrations: Sequence[Registration] = (),
        migrations: Sequence[MigrationRequest] = (),
        context: dict[str, Any] | None = None,
    ) -> MaterializeResult:
        """Run one generator operation against the project.

        Args:
            names: Name forms of the resource (or project) being generated.
            assets: Templates to expand and write, in order.
            patches: Edits to existing files, applied after all assets.
            registrations: Registry entries appended after the patches.
            migrations: Migration directories created last.
            context: Extra variables for ``.j2`` assets.

        Raises:
            MaterializeError: On the first failing step.
        """
        result = MaterializeResult()
        render_context = {**names.model_dump(), **(context or {})}

        for asset in assets:
            destination = self.project_dir / strip_jinja_suffix(asset.logical_path)
            try:
                destination = self.destination(asset, names)
                self._write_asset(asset, destination, names, render_context)
            except ScaffoldError as exc:
                raise MaterializeError("asset", destination, exc) from exc
            result.written.append(destination)

        for spec in patches:
            try:
                result.patched.append(apply_patch(spec, self.project_dir))
            except ScaffoldError as exc:
                raise MaterializeError(spec.describe(), spec.resolve(self.project_dir), exc) from exc
            self._log(patch_msg, spec.describe())

        for registration in registrations:
            registry_path = self.project_dir / registration.registry_path
            try:
                register_module(registry_path, registration.entry)
            except ScaffoldError as exc:
                raise MaterializeError("register", registry_path, exc) from exc
            result.registered.append((registry_path, registration.entry))
            self._log(register_msg, registration.entry, str(registration.registry_path))

        for request in migrations:
            root = self.project_dir / self.migrations_dir
            try:
                migration = create_migration(
                    root, request.name, request.up_content, request.down_content
                )
            except ScaffoldError as exc:
                raise MaterializeError("migration", root / request.name, exc) from exc
            result.migrations.append(migration)
            self._log(file_msg, str(self.migrations_dir / migration.name))

        return result

    def destination(self, asset: TemplateAsset, names: ResourceNameSet) -> Path:
        """Project path an asset is written to; placeholders in the path are expanded."""
        relative = self.expander.expand(strip_jinja_suffix(asset.logical_path), names)
        return self.project_dir / relative

    # -- Internals ---------------------------------------------------------

    def _write_asset(
        self,
        asset: TemplateAsset,
        destination: Path,
        names: ResourceNameSet,
        context: dict[str, Any],
    ) -> None:
        try:
            text = asset.text()
        except UnicodeDecodeError:
            _write_file(destination, asset.raw_bytes)
        else:
            if asset.is_jinja:
                try:
                    content = self.renderer.render_string(text, context)
                except jinja2.TemplateError as exc:
                    raise TemplateError(str(exc), source=asset.logical_path) from exc
            else:
                content = self.expander.expand(text, names, source=asset.logical_path)
            _write_file(destination, content.encode("utf-8"))
        self._log(file_msg, str(destination.relative_to(self.project_dir)))

    def _log(self, fn: Any, *args: str) -> None:
        if self.verbose:
            fn(*args)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _write_file(path: Path, content: bytes) -> None:
    """Create parent dirs and write content."""
    try:
        ensure_dir(path.parent)
        path.write_bytes(content)
    except OSError as exc:
        raise IoError(path, str(exc)) from exc

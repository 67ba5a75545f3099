"""Template assets and Jinja2 rendering for project scaffolding.

The :class:`TemplateStore` is a read-only view over template files exposed
through a Jinja2 loader: the embedded ``crabgen/templates/`` tree by default,
or a ``DictLoader``/``FileSystemLoader`` supplied by the caller.  The
:class:`TemplateRenderer` renders ``.j2`` assets from the same loader with
project-specific context data.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import (
    BaseLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)

from crabgen.naming import pascal, snake, table

from .errors import AssetNotFound, IoError

JINJA_SUFFIX = ".j2"

_DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TemplateAsset:
    """One template file: its logical path and raw content."""

    logical_path: str
    raw_bytes: bytes

    @property
    def is_jinja(self) -> bool:
        return self.logical_path.endswith(JINJA_SUFFIX)

    def text(self) -> str:
        return self.raw_bytes.decode("utf-8")

    def relative_to(self, prefix: str) -> "TemplateAsset":
        """Return a copy whose logical path has *prefix* stripped."""
        prefix = prefix.strip("/") + "/"
        if not self.logical_path.startswith(prefix):
            raise ValueError(f"{self.logical_path} is not under {prefix}")
        return TemplateAsset(self.logical_path[len(prefix):], self.raw_bytes)


# ---------------------------------------------------------------------------
# TemplateStore
# ---------------------------------------------------------------------------


class TemplateStore:
    """Read-only mapping of logical template paths to their content.

    When the store is backed by a directory (the default, or
    :meth:`from_directory`) assets are read as raw bytes from disk, so binary
    files pass through untouched.  Other loaders only serve text.
    """

    def __init__(self, loader: BaseLoader | None = None, root: Path | None = None) -> None:
        if loader is None:
            root = _DEFAULT_TEMPLATE_DIR
            loader = FileSystemLoader(str(root))
        self.loader = loader
        self.root = Path(root) if root is not None else None
        # Only used to satisfy the loader API; assets are read raw.
        self._env = Environment(loader=loader, autoescape=select_autoescape([]))

    @classmethod
    def from_mapping(cls, assets: dict[str, str]) -> "TemplateStore":
        """Build an in-memory store, mostly useful in tests."""
        return cls(DictLoader(dict(assets)))

    @classmethod
    def from_directory(cls, template_dir: str | Path) -> "TemplateStore":
        return cls(FileSystemLoader(str(template_dir)), root=Path(template_dir))

    def list(self, prefix: str = "") -> list[str]:
        """Return the sorted logical paths under *prefix* (all when empty)."""
        names = self.loader.list_templates()
        if prefix:
            prefix = prefix.strip("/") + "/"
            names = [n for n in names if n.startswith(prefix)]
        return sorted(names)

    def get(self, logical_path: str) -> bytes:
        """Return the raw content of *logical_path*.

        Raises:
            AssetNotFound: If the store has no such asset.
            IoError: If the asset cannot be read, or a text-only loader
                holds content that is not UTF-8.
        """
        if self.root is not None:
            return self._read_file(logical_path)
        try:
            source, _, _ = self.loader.get_source(self._env, logical_path)
        except TemplateNotFound as exc:
            raise AssetNotFound(logical_path) from exc
        except UnicodeDecodeError as exc:
            raise IoError(logical_path, f"asset is not UTF-8 text: {exc}") from exc
        return source.encode("utf-8")

    def _read_file(self, logical_path: str) -> bytes:
        parts = logical_path.split("/")
        if any(part in ("", ".", "..") for part in parts):
            raise AssetNotFound(logical_path)
        path = self.root.joinpath(*parts)
        if not path.is_file():
            raise AssetNotFound(logical_path)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise IoError(path, str(exc)) from exc

    def asset(self, logical_path: str) -> TemplateAsset:
        return TemplateAsset(logical_path, self.get(logical_path))

    def assets(self, prefix: str) -> list[TemplateAsset]:
        """Return every asset under *prefix*, with the prefix stripped from the path."""
        return [self.asset(name).relative_to(prefix) for name in self.list(prefix)]

    def __contains__(self, logical_path: str) -> bool:
        try:
            self.get(logical_path)
        except AssetNotFound:
            return False
        return True


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    Templates are looked up through the store's loader and rendered with a
    context dictionary holding project metadata and resource name forms.
    Missing variables raise instead of rendering as empty strings.
    """

    def __init__(self, store: TemplateStore | None = None) -> None:
        self.store = store or TemplateStore()
        self.env = Environment(
            loader=self.store.loader,
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.env.filters["pascal_case"] = pascal
        self.env.filters["snake_case"] = snake
        self.env.filters["table_case"] = table

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Raises:
            AssetNotFound: If *template_path* is not in the store.
        """
        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as exc:
            raise AssetNotFound(template_path) from exc
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        return self.env.from_string(template_string).render(**context)


def strip_jinja_suffix(path: str) -> str:
    return path[: -len(JINJA_SUFFIX)] if path.endswith(JINJA_SUFFIX) else path

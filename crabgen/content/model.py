"""Diesel model generation for a resource.

The model template uses ``$MODEL_NAME`` (struct name), ``$MODEL_NAMEChangeset``
(the insert/update struct) and ``$TABLE_NAME`` (the Diesel table).
"""

from __future__ import annotations

from crabgen.config import LayoutConfig
from crabgen.naming import ResourceNameSet
from crabgen.scaffolder.materializer import Registration
from crabgen.scaffolder.placeholders import PlaceholderExpander
from crabgen.scaffolder.templates import TemplateAsset, TemplateStore

MODEL_TEMPLATE = "resource/model.rs"


def model_asset(store: TemplateStore, layout: LayoutConfig) -> TemplateAsset:
    """Model template addressed at ``<models_dir>/$FILE_NAME.rs``."""
    return TemplateAsset(f"{layout.models_dir}/$FILE_NAME.rs", store.get(MODEL_TEMPLATE))


def model_registration(layout: LayoutConfig, names: ResourceNameSet) -> Registration:
    return Registration(layout.models_registry, names.snake_case)


def generate_model(
    names: ResourceNameSet,
    store: TemplateStore | None = None,
    expander: PlaceholderExpander | None = None,
) -> str:
    """Return the expanded model source for *names* without writing anything."""
    store = store or TemplateStore()
    expander = expander or PlaceholderExpander()
    return expander.expand(store.get(MODEL_TEMPLATE).decode("utf-8"), names, source=MODEL_TEMPLATE)

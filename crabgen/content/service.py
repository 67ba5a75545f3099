"""Backend service generation and route registration.

Services are registered in the backend entry point by patching a fixed
landmark: ``web::scope("/api")`` for actix-web and
``let mut api_routes = Route::new();`` for poem.  The landmark is kept after
every patch so later resources and plugins register at the same place.
"""

from __future__ import annotations

from crabgen.config import BackendFramework, LayoutConfig
from crabgen.naming import ResourceNameSet
from crabgen.scaffolder.materializer import Registration
from crabgen.scaffolder.patcher import PatchSpec
from crabgen.scaffolder.templates import TemplateAsset, TemplateStore

SERVICE_TEMPLATES: dict[BackendFramework, str] = {
    BackendFramework.ACTIX_WEB: "resource/service_actix.rs",
    BackendFramework.POEM: "resource/service_poem.rs",
}

ACTIX_ANCHOR = 'web::scope("/api")'
POEM_ANCHOR = "let mut api_routes = Route::new();"


def service_asset(
    store: TemplateStore, layout: LayoutConfig, framework: BackendFramework
) -> TemplateAsset:
    """Service template for *framework*, addressed at ``<services_dir>/$FILE_NAME.rs``."""
    return TemplateAsset(
        f"{layout.services_dir}/$FILE_NAME.rs", store.get(SERVICE_TEMPLATES[framework])
    )


def service_registration(layout: LayoutConfig, names: ResourceNameSet) -> Registration:
    return Registration(layout.services_registry, names.snake_case)


def register_actix(main_file: str, service: str) -> PatchSpec:
    """Mount *service* (an expression returning a scope) under ``/api``."""
    return PatchSpec.after_anchor(
        main_file, ACTIX_ANCHOR, f"\n                    .service({service})"
    )


def register_poem(main_file: str, api: str, path: str) -> PatchSpec:
    """Nest *api* (an expression returning a ``Route``) at *path* under ``/api``."""
    return PatchSpec.after_anchor(
        main_file, POEM_ANCHOR, f'\n    api_routes = api_routes.nest("{path}", {api});'
    )


def route_registration(
    framework: BackendFramework, main_file: str, names: ResourceNameSet
) -> PatchSpec:
    """Patch that exposes a generated resource service at ``/api/<table>``."""
    if framework is BackendFramework.ACTIX_WEB:
        return register_actix(
            main_file,
            f'services::{names.snake_case}::endpoints(web::scope("/{names.table_case}"))',
        )
    return register_poem(main_file, f"services::{names.snake_case}::api()", f"/{names.table_case}")

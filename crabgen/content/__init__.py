"""Per-resource source generators (Diesel models and backend services)."""

from crabgen.content.model import generate_model, model_asset, model_registration
from crabgen.content.service import (
    register_actix,
    register_poem,
    route_registration,
    service_asset,
    service_registration,
)

__all__ = [
    "generate_model",
    "model_asset",
    "model_registration",
    "register_actix",
    "register_poem",
    "route_registration",
    "service_asset",
    "service_registration",
]

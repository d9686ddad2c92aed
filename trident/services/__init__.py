"""Service package public API definitions.

``trident.services.exceptions`` is imported by the configuration and client
modules, so the service implementations are imported lazily here; importing
them eagerly would pull ``trident.config`` back in while it is still loading.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "CampaignOptions",
    "CampaignService",
]

_SERVICE_MODULES = {
    "CampaignOptions": "campaign",
    "CampaignService": "campaign",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .campaign import CampaignOptions as CampaignOptions
    from .campaign import CampaignService as CampaignService

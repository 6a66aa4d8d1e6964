"""Process-wide service instances for the HTTP routes.

The tree provider holds the expansion cache, so it is built once and
rebuilt only when the configured workspace changes.
"""

from __future__ import annotations

from resultlens.core.config import settings
from resultlens.core.containers import build_location_resolver, build_tree_provider
from resultlens.services.location_service import LocationResolver
from resultlens.services.tree_service import ResultTreeProvider

_provider: ResultTreeProvider | None = None
_provider_key: tuple | None = None


def get_tree_provider() -> ResultTreeProvider:
    global _provider, _provider_key
    key = (settings.WORKSPACE_ROOT, settings.RESULTS_DIR, settings.LABEL_MAX_LENGTH)
    if _provider is None or key != _provider_key:
        _provider = build_tree_provider(settings)
        _provider_key = key
    return _provider


def get_location_resolver() -> LocationResolver:
    return build_location_resolver(settings)

from __future__ import annotations

from resultlens.core.config import Settings, settings as default_settings
from resultlens.parsers.checkov_parser import CheckovParser
from resultlens.parsers.gitleaks_parser import GitLeaksParser
from resultlens.parsers.registry import ParserRegistry
from resultlens.parsers.semgrep_parser import SemgrepParser
from resultlens.parsers.trivy_parser import TrivyParser
from resultlens.services.location_service import LocationResolver
from resultlens.services.tree_service import ResultTreeProvider


def build_parser_registry(label_max_length: int = 100) -> ParserRegistry:
    """Register all supported report formats.

    Order matters: the first parser whose ``can_handle`` accepts a file
    wins. Checkov goes first because it also recognizes its output by
    filename.

    To add a new format:
    1. Subclass ``FormatParser`` in ``resultlens/parsers/``
    2. ``registry.register(MyParser(...))`` here
    """
    registry = ParserRegistry()
    registry.register(CheckovParser(label_max_length))
    registry.register(GitLeaksParser(label_max_length))
    registry.register(TrivyParser(label_max_length))
    registry.register(SemgrepParser(label_max_length))
    return registry


def build_tree_provider(cfg: Settings | None = None) -> ResultTreeProvider:
    cfg = cfg or default_settings
    return ResultTreeProvider(
        build_parser_registry(cfg.LABEL_MAX_LENGTH),
        workspace_root=cfg.WORKSPACE_ROOT,
        results_dir=cfg.RESULTS_DIR,
        label_max_length=cfg.LABEL_MAX_LENGTH,
    )


def build_location_resolver(cfg: Settings | None = None) -> LocationResolver:
    cfg = cfg or default_settings
    return LocationResolver(cfg.WORKSPACE_ROOT, container_prefix=cfg.CONTAINER_PREFIX)

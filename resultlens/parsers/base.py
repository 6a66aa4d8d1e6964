from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from resultlens.domain.models import ResultNode, error_node

logger = logging.getLogger(__name__)


class MalformedDocument(ValueError):
    """A claimed report is missing a field the parser cannot do without."""


class FormatParser(ABC):
    """Detection + normalization for one scanning tool's JSON report.

    ``can_handle`` is a pure structural test. ``parse`` never raises:
    anything that goes wrong while building the tree is reported as a
    single error node instead.
    """

    id: str = ""
    name: str = ""
    supported_extensions: tuple[str, ...] = (".json",)

    def __init__(self, label_max_length: int = 100) -> None:
        self.label_max_length = label_max_length

    def has_supported_extension(self, filename: str) -> bool:
        return filename.lower().endswith(self.supported_extensions)

    @abstractmethod
    def can_handle(self, filename: str, doc: Any) -> bool: ...

    @abstractmethod
    def build(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]: ...

    def parse(self, doc: Any, file_path: str, filename: str) -> list[ResultNode]:
        try:
            nodes = self.build(doc, file_path, filename)
        except Exception as e:
            logger.exception("Error parsing %s data", self.name, extra={"report": filename})
            return [error_node(f"Error parsing {self.name} data: {e}")]
        if not nodes:
            return [error_node(f"{self.name} report produced no results")]
        return nodes

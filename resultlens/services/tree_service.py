from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from resultlens.domain.models import ResultNode, SeverityHint, error_node, info_node
from resultlens.parsers.registry import ParserRegistry
from .generic_summary import summarize_json

logger = logging.getLogger(__name__)


class ExpansionState(str, Enum):
    UNEXPANDED = "unexpanded"
    EXPANDED = "expanded"
    LEAF = "leaf"


@dataclass
class FileNode:
    """One result file at the root of the tree.

    Children are computed on the first expansion and kept until the
    provider is refreshed.
    """

    name: str
    path: Path
    state: ExpansionState = ExpansionState.UNEXPANDED
    parser_id: str | None = None
    _children: list[ResultNode] | None = field(default=None, repr=False)

    @property
    def label(self) -> str:
        return self.name

    @property
    def detail(self) -> str:
        return f"Result file: {self.name}"

    def to_dict(self) -> dict:
        return {
            "label": self.name,
            "detail": self.detail,
            "state": self.state.value,
            "parser": self.parser_id,
        }


@dataclass
class Placeholder:
    """Informational root entry shown when there is nothing to list."""

    node: ResultNode
    state: ExpansionState = ExpansionState.LEAF

    def to_dict(self) -> dict:
        d = self.node.to_dict()
        d["state"] = self.state.value
        return d


RootEntry = FileNode | Placeholder


class ResultTreeProvider:
    """
    Lazily materializes the result tree: root lists report files, a file
    expands into the nodes produced by its parser (or the generic summary).
    """

    def __init__(
        self,
        registry: ParserRegistry,
        workspace_root: str | Path | None,
        results_dir: str = ".niobium_results",
        label_max_length: int = 100,
    ):
        self.registry = registry
        self.workspace_root = Path(workspace_root) if workspace_root else None
        self.results_dir_name = results_dir
        self.label_max_length = label_max_length
        self._roots: list[RootEntry] | None = None

    @property
    def results_dir(self) -> Path | None:
        if self.workspace_root is None:
            return None
        return self.workspace_root / self.results_dir_name

    # ── Root level ────────────────────────────────────────────────────
    def roots(self) -> list[RootEntry]:
        if self._roots is None:
            self._roots = self._list_roots()
        return list(self._roots)

    def _list_roots(self) -> list[RootEntry]:
        results_dir = self.results_dir
        if results_dir is None:
            return [Placeholder(info_node("No workspace open"))]
        if not results_dir.is_dir():
            return [Placeholder(info_node("No scan results found"))]

        try:
            files = sorted(
                p for p in results_dir.iterdir() if p.is_file() and p.name.endswith(".json")
            )
        except OSError as e:
            logger.warning("Could not list %s: %s", results_dir, e)
            return [Placeholder(info_node(f"Error reading results: {e}"))]

        if not files:
            return [Placeholder(info_node("No scan results found"))]
        return [FileNode(name=p.name, path=p) for p in files]

    def file_nodes(self) -> list[FileNode]:
        return [r for r in self.roots() if isinstance(r, FileNode)]

    def find(self, filename: str) -> FileNode | None:
        for node in self.file_nodes():
            if node.name == filename:
                return node
        return None

    # ── Expansion ─────────────────────────────────────────────────────
    def expand(self, node: FileNode) -> list[ResultNode]:
        if node.state is ExpansionState.EXPANDED and node._children is not None:
            return node._children

        node._children = self._materialize(node)
        node.state = ExpansionState.EXPANDED
        return node._children

    def expand_by_name(self, filename: str) -> list[ResultNode] | None:
        node = self.find(filename)
        if node is None:
            return None
        return self.expand(node)

    def _materialize(self, node: FileNode) -> list[ResultNode]:
        node.parser_id = None
        try:
            content = node.path.read_text(encoding="utf-8")
            doc = json.loads(content)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s: %s", node.path, e, extra={"report": node.name})
            return [error_node(f"Error parsing file: {e}")]

        parser = self.registry.find_for(node.name, doc)
        if parser is None:
            logger.info("No parser for %s, using generic summary", node.name, extra={"report": node.name})
            return summarize_json(doc, node.name, self.label_max_length)

        logger.info("Parsing %s with %s", node.name, parser.name, extra={"report": node.name})
        node.parser_id = parser.id
        try:
            children = parser.parse(doc, str(node.path), node.name)
        except Exception as e:
            logger.exception("%s parser failed", parser.name, extra={"report": node.name})
            return [error_node(f"Error parsing file: {e}")]
        return children or [ResultNode(label="No details available", severity=SeverityHint.INFO)]

    def read_raw(self, filename: str) -> str | None:
        node = self.find(filename)
        if node is None or not node.path.is_file():
            return None
        return node.path.read_text(encoding="utf-8", errors="replace")

    def refresh(self) -> None:
        """Forget every cached expansion and the root listing."""
        logger.info("Refreshing result tree")
        if self._roots is not None:
            for node in self._roots:
                if isinstance(node, FileNode):
                    node.state = ExpansionState.UNEXPANDED
                    node.parser_id = None
                    node._children = None
        self._roots = None

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SeverityHint(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    PASSED = "passed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NavigationTarget:
    """A finding location as the tool reported it (1-based line/column)."""

    path: str
    line: int | None = None
    column: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"path": self.path, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class NodeAction:
    """Navigation-less affordance, e.g. opening the raw report in a viewer."""

    kind: str
    target: str

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "target": self.target}


@dataclass
class ResultNode:
    label: str
    severity: SeverityHint | None = None
    detail: str | None = None
    tooltip: str | None = None
    navigation: NavigationTarget | None = None
    action: NodeAction | None = None
    # None = leaf; a list (possibly empty) = already materialized children
    children: list[ResultNode] | None = None
    # Set on nodes that stand for one open issue reported by a tool
    finding: bool = False

    def __post_init__(self) -> None:
        if not self.label:
            self.label = "(unnamed)"

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    def iter_nodes(self):
        yield self
        for child in self.children or ():
            yield from child.iter_nodes()

    def iter_leaves(self):
        if self.children is None:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "severity": self.severity.value if self.severity else None,
            "detail": self.detail,
            "tooltip": self.tooltip,
            "navigation": self.navigation.to_dict() if self.navigation else None,
            "action": self.action.to_dict() if self.action else None,
            "finding": self.finding,
            "children": [c.to_dict() for c in self.children] if self.children is not None else None,
        }


def error_node(message: str) -> ResultNode:
    return ResultNode(label=message, severity=SeverityHint.ERROR, tooltip=message)


def info_node(message: str) -> ResultNode:
    return ResultNode(label=message, severity=SeverityHint.INFO)

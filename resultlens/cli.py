#!/usr/bin/env python3
"""Print the normalized result tree and optionally gate on error findings.

    resultlens --workspace . --max-errors 0
"""

from __future__ import annotations

import argparse
import sys

from resultlens.core.config import settings
from resultlens.core.containers import build_tree_provider
from resultlens.domain.models import ResultNode, SeverityHint
from resultlens.services.tree_service import FileNode

MARKS = {
    SeverityHint.ERROR: "✗",
    SeverityHint.WARNING: "!",
    SeverityHint.INFO: "i",
    SeverityHint.PASSED: "✓",
    SeverityHint.UNKNOWN: "?",
}


def print_nodes(nodes: list[ResultNode], depth: int, max_depth: int | None, out) -> None:
    for node in nodes:
        mark = MARKS.get(node.severity, "·") if node.severity else "·"
        line = f"{'  ' * depth}{mark} {node.label}"
        if node.detail:
            line += f"  ({node.detail})"
        print(line, file=out)
        if node.children and (max_depth is None or depth + 1 < max_depth):
            print_nodes(node.children, depth + 1, max_depth, out)


def count_error_findings(nodes: list[ResultNode]) -> int:
    return sum(
        1
        for n in nodes
        for node in n.iter_nodes()
        if node.finding and node.severity is SeverityHint.ERROR
    )


def main(argv: list[str] | None = None, out=None) -> int:
    out = out or sys.stdout
    ap = argparse.ArgumentParser(prog="resultlens")
    ap.add_argument("--workspace", default=settings.WORKSPACE_ROOT, help="project root (default: $WORKSPACE_ROOT)")
    ap.add_argument("--results-dir", default=settings.RESULTS_DIR)
    ap.add_argument("--depth", type=int, default=None, help="maximum tree depth to print")
    ap.add_argument("--max-errors", type=int, default=None, help="fail when more error findings are found")
    args = ap.parse_args(argv)

    cfg = settings.model_copy(update={"WORKSPACE_ROOT": args.workspace, "RESULTS_DIR": args.results_dir})
    provider = build_tree_provider(cfg)

    errors = 0
    for root in provider.roots():
        if not isinstance(root, FileNode):
            print(root.node.label, file=out)
            continue
        children = provider.expand(root)
        print(f"{root.name}", file=out)
        print_nodes(children, 1, args.depth, out)
        errors += count_error_findings(children)

    if args.max_errors is None:
        return 0

    print(f"[gate] error_findings={errors} (max {args.max_errors})", file=out)
    if errors > args.max_errors:
        print("[gate] FAILED", file=out)
        return 1
    print("[gate] PASSED", file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())

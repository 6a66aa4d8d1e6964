from __future__ import annotations

from typing import Any

from resultlens.domain.models import NodeAction, ResultNode, SeverityHint
from resultlens.parsers.util import truncate

SHOW_FULL_REPORT = "show_full_report"


def summarize_json(doc: Any, filename: str, max_length: int = 100) -> list[ResultNode]:
    """Key/value overview for reports no parser recognizes."""
    out = [ResultNode(label=f"File: {filename}", severity=SeverityHint.INFO)]

    if isinstance(doc, dict):
        for key, value in doc.items():
            out.append(ResultNode(label=truncate(f"{key}: {_describe(value)}", max_length), tooltip=f"{key}: {_describe(value)}"))
    elif isinstance(doc, list):
        out.append(ResultNode(label=f"items: {len(doc)} items"))
    else:
        out.append(ResultNode(label=truncate(f"value: {_describe(doc)}", max_length)))

    out.append(
        ResultNode(
            label="View Full Report",
            detail="Click to view the full report",
            action=NodeAction(kind=SHOW_FULL_REPORT, target=filename),
        )
    )
    return out


def _describe(value: Any) -> str:
    if isinstance(value, list):
        return f"{len(value)} items"
    if isinstance(value, dict):
        return f"{len(value)} keys"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)

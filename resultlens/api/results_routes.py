from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from resultlens.api.deps import get_tree_provider
from resultlens.services.tree_service import ResultTreeProvider

router = APIRouter(prefix="/api", tags=["results"])


# ── Response schemas ──────────────────────────────────────────────
class RootListing(BaseModel):
    """Result files found in the results directory (or one placeholder)."""

    results_dir: str | None = Field(None, description="Absolute path of the results directory, if a workspace is open.")
    items: list[dict[str, Any]]


class ExpandedFile(BaseModel):
    """Normalized tree for one result file."""

    filename: str
    parser: str | None = Field(None, description="Id of the parser that recognized the file, or null for the generic summary.")
    children: list[dict[str, Any]]


class ParserInfo(BaseModel):
    id: str
    name: str
    supported_extensions: list[str]


# ── Endpoints ─────────────────────────────────────────────────────
@router.get(
    "/parsers",
    response_model=list[ParserInfo],
    summary="List report parsers",
    response_description="Registered parsers in detection order",
)
def list_parsers(provider: ResultTreeProvider = Depends(get_tree_provider)) -> list[dict[str, Any]]:
    """Return the registered report formats in the order they are tried.

    Formats: **Checkov** (IaC), **GitLeaks** (secrets), **Trivy**
    (misconfigurations and vulnerabilities), **Semgrep** (SAST).
    """
    return [
        {"id": r.id, "name": r.name, "supported_extensions": list(r.supported_extensions)}
        for r in provider.registry.registrations()
    ]


@router.get(
    "/results",
    response_model=RootListing,
    summary="List result files",
    response_description="Root level of the result tree",
)
def list_results(provider: ResultTreeProvider = Depends(get_tree_provider)) -> dict[str, Any]:
    """List the `*.json` reports in the results directory.

    When there is no workspace or no report, a single informational
    placeholder is returned instead.
    """
    results_dir = provider.results_dir
    return {
        "results_dir": str(results_dir) if results_dir else None,
        "items": [r.to_dict() for r in provider.roots()],
    }


@router.post(
    "/results/refresh",
    response_model=RootListing,
    summary="Refresh result tree",
    response_description="Root level after invalidating every cached expansion",
)
def refresh_results(provider: ResultTreeProvider = Depends(get_tree_provider)) -> dict[str, Any]:
    """Drop all cached expansions and list the results directory again."""
    provider.refresh()
    return list_results(provider)


@router.get(
    "/results/{filename}",
    response_model=ExpandedFile,
    summary="Expand a result file",
    response_description="Normalized findings tree for the file",
)
def expand_result(filename: str, provider: ResultTreeProvider = Depends(get_tree_provider)) -> dict[str, Any]:
    """Parse a report and return its tree.

    The tree is computed on the first request and served from cache until
    `POST /api/results/refresh`.
    """
    node = provider.find(filename)
    if node is None:
        raise HTTPException(status_code=404, detail=f"Result file not found: {filename}")

    children = provider.expand(node)
    return {
        "filename": filename,
        "parser": node.parser_id,
        "children": [c.to_dict() for c in children],
    }


@router.get(
    "/results/{filename}/raw",
    response_class=PlainTextResponse,
    summary="View full report",
    response_description="Raw report content",
)
def raw_result(filename: str, provider: ResultTreeProvider = Depends(get_tree_provider)) -> str:
    """Return the report exactly as it is on disk."""
    text = provider.read_raw(filename)
    if text is None:
        raise HTTPException(status_code=404, detail=f"File not found: {filename}")
    return text


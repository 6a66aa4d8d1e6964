from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from resultlens.api.deps import get_location_resolver
from resultlens.services.location_service import LocationResolver, to_cursor
from resultlens.services.navigation_service import (
    EditorHost,
    NavigatedTo,
    NavigationService,
    NavigationUnavailable,
)

router = APIRouter(prefix="/api", tags=["navigation"])


class NavigateRequest(BaseModel):
    """A finding location as reported by the scanner."""

    path: str = Field(..., description="Path exactly as the tool reported it.", json_schema_extra={"examples": ["/src/main.tf"]})
    line: int | None = Field(None, description="1-based line.")
    column: int | None = Field(None, description="1-based column (0 or omitted = start of line).")
    selected_path: str | None = Field(
        None,
        description="File chosen by the user after a previous `file_not_found` response.",
    )


class NavigateResponse(BaseModel):
    path: str
    line: int | None
    column: int | None
    cursor: dict[str, int] = Field(..., description="0-based editor position.")


class _RequestHost(EditorHost):
    """Answers the selection prompt with whatever the client sent along."""

    def __init__(self, selected_path: str | None):
        self._selected = selected_path

    async def open_at(self, path: Path, line: int | None, column: int | None) -> None:
        if not path.is_file():
            raise FileNotFoundError(str(path))

    async def pick_file(self, hint: str) -> Path | None:
        selected, self._selected = self._selected, None
        return Path(selected) if selected else None


@router.post(
    "/navigate",
    response_model=NavigateResponse,
    summary="Resolve a finding location",
    response_description="Project file and cursor position to open",
)
async def navigate(req: NavigateRequest, resolver: LocationResolver = Depends(get_location_resolver)) -> dict[str, Any]:
    """Map a scanner-reported path onto a file in the workspace.

    If the file does not exist the response is a 404 whose detail has
    `select_file: true`; repeat the request with `selected_path` set to the
    file the user picked.
    """
    outcome = await NavigationService(resolver, _RequestHost(req.selected_path)).navigate(req.path, req.line, req.column)

    if isinstance(outcome, NavigationUnavailable):
        raise HTTPException(status_code=400, detail=outcome.reason)

    if not isinstance(outcome, NavigatedTo):
        raise HTTPException(
            status_code=404,
            detail={
                "error": "file_not_found",
                "resolved_path": str(outcome.resolved_path) if outcome.resolved_path else None,
                "select_file": True,
            },
        )

    row, col = to_cursor(outcome.line, outcome.column)
    return {
        "path": str(outcome.path),
        "line": outcome.line,
        "column": outcome.column,
        "cursor": {"line": row, "character": col},
    }

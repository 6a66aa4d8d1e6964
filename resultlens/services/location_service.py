from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


class NoWorkspaceError(RuntimeError):
    pass


@dataclass(frozen=True)
class ResolvedLocation:
    path: Path
    line: int | None
    column: int | None
    exists: bool


def to_cursor(line: int | None, column: int | None) -> tuple[int, int]:
    """Convert a tool's 1-based (line, column) to a 0-based editor cursor."""
    row = max(0, line - 1) if line and line > 0 else 0
    col = max(0, column - 1) if column else 0
    return row, col


class LocationResolver:
    """
    Map a path reported by a scanner onto a file in the project tree.

    Rules, first match wins:
    1. container mount prefix (``/src/...``) → strip it, join to the root
    2. leading separator that is not a real absolute path here → join the
       rest to the root
    3. real absolute path → used as-is
    4. anything else → relative to the root
    """

    def __init__(self, workspace_root: str | Path | None, container_prefix: str = "/src/"):
        self.workspace_root = Path(workspace_root) if workspace_root else None
        self.container_prefix = container_prefix

    def _root(self) -> Path:
        if self.workspace_root is None:
            raise NoWorkspaceError("No workspace folder is open")
        return self.workspace_root

    def resolve_path(self, raw_path: str) -> Path:
        root = self._root()
        raw = (raw_path or "").strip()

        if self.container_prefix and raw.startswith(self.container_prefix):
            return root / raw[len(self.container_prefix):]

        if raw.startswith(("/", "\\")) and not self._is_environment_absolute(raw, root):
            return root / raw.lstrip("/\\")

        if os.path.isabs(raw):
            return Path(raw)

        return root / raw

    def resolve(self, raw_path: str, line: int | None = None, column: int | None = None) -> ResolvedLocation:
        path = self.resolve_path(raw_path)
        return ResolvedLocation(path=path, line=line, column=column, exists=path.is_file())

    @staticmethod
    def _is_environment_absolute(raw: str, root: Path) -> bool:
        # Tools running in a sandbox report paths like "/a/b.yaml" that only
        # make sense relative to the project; a leading separator counts as
        # absolute only if the path is real here or already under the root.
        if not os.path.isabs(raw):
            return False
        p = Path(raw)
        if p.exists():
            return True
        try:
            p.relative_to(root)
        except ValueError:
            return False
        return True

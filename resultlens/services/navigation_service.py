from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from .location_service import LocationResolver, NoWorkspaceError, to_cursor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigatedTo:
    path: Path
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class UserCancelled:
    resolved_path: Path | None = None


@dataclass(frozen=True)
class NavigationUnavailable:
    reason: str


NavigationOutcome = NavigatedTo | UserCancelled | NavigationUnavailable


class EditorHost(ABC):
    """What navigation needs from whatever displays source files."""

    @abstractmethod
    async def open_at(self, path: Path, line: int | None, column: int | None) -> None:
        """Open ``path`` with the cursor at the 1-based location.

        Raises ``FileNotFoundError`` (or another ``OSError``) when the file
        cannot be opened.
        """

    @abstractmethod
    async def pick_file(self, hint: str) -> Path | None:
        """Ask the user for a replacement file; ``None`` means cancelled."""


class NavigationService:
    def __init__(self, resolver: LocationResolver, host: EditorHost):
        self.resolver = resolver
        self.host = host

    async def navigate(self, raw_path: str, line: int | None = None, column: int | None = None) -> NavigationOutcome:
        try:
            loc = self.resolver.resolve(raw_path, line, column)
        except NoWorkspaceError as e:
            return NavigationUnavailable(reason=str(e))

        if loc.exists:
            try:
                await self.host.open_at(loc.path, line, column)
                return NavigatedTo(loc.path, line, column)
            except OSError as e:
                logger.warning("Could not open %s: %s", loc.path, e)
        else:
            logger.warning("File not found: %s (reported as %s)", loc.path, raw_path)

        hint = Path(raw_path).name or raw_path
        while True:
            chosen = await self.host.pick_file(hint)
            if chosen is None:
                return UserCancelled(resolved_path=loc.path)
            try:
                await self.host.open_at(chosen, line, column)
                return NavigatedTo(chosen, line, column)
            except OSError as e:
                logger.warning("Could not open selected file %s: %s", chosen, e)


class SnippetHost(EditorHost):
    """Editor stand-in for viewers that can only display text.

    ``show(path, line, snippet)`` renders the lines around the location and
    ``ask(hint)`` returns the path the user entered (empty means cancel).
    The user is asked at most once per navigation; a viewer that reruns on
    input gets its retry from the next run.
    """

    def __init__(self, show, ask, context: int = 3):
        self.show = show
        self.ask = ask
        self.context = context
        self._asked = False

    async def open_at(self, path: Path, line: int | None, column: int | None) -> None:
        lines = Path(path).read_text(encoding="utf-8", errors="replace").splitlines()
        row, _ = to_cursor(line, column)
        start = max(0, row - self.context)
        self.show(Path(path), line or 1, "\n".join(lines[start:row + self.context + 1]))

    async def pick_file(self, hint: str) -> Path | None:
        if self._asked:
            return None
        self._asked = True
        chosen = self.ask(hint)
        return Path(chosen) if chosen else None

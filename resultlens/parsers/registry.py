from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .base import FormatParser


@dataclass(frozen=True)
class ParserRegistration:
    id: str
    name: str
    supported_extensions: tuple[str, ...]
    instance: FormatParser


class ParserRegistry:
    """Ordered collection of format parsers.

    Detection is first-match-wins in registration order, so parsers with
    filename-keyed fast paths should be registered before parsers that only
    look at generic structure. Duplicate ids are allowed.
    """

    def __init__(self, parsers: Iterable[FormatParser] = ()) -> None:
        self._registrations: list[ParserRegistration] = []
        for p in parsers:
            self.register(p)

    def register(self, parser: FormatParser) -> None:
        self._registrations.append(
            ParserRegistration(
                id=parser.id,
                name=parser.name,
                supported_extensions=tuple(parser.supported_extensions),
                instance=parser,
            )
        )

    def find_for(self, filename: str, doc: Any) -> FormatParser | None:
        for reg in self._registrations:
            if reg.instance.can_handle(filename, doc):
                return reg.instance
        return None

    def list_all(self) -> list[FormatParser]:
        return [reg.instance for reg in self._registrations]

    def registrations(self) -> list[ParserRegistration]:
        return list(self._registrations)

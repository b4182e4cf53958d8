from __future__ import annotations

from typing import Iterable, Iterator, Protocol


class CodeSource(Protocol):
    """Produces decoded QR payloads lazily until closed."""

    def codes(self) -> Iterator[str]:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class ManualCodeSource(CodeSource):
    """Codes typed in by an operator (the scanner page's text field)."""

    def __init__(self, entries: Iterable[str]):
        self._entries = entries
        self._closed = False

    def codes(self) -> Iterator[str]:
        for raw in self._entries:
            if self._closed:
                return
            value = (raw or "").strip()
            if value:
                yield value

    def close(self) -> None:
        self._closed = True

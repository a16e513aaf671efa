"""Collaborators the workflows talk to, expressed as protocols."""

from __future__ import annotations

from typing import List, Optional, Protocol

from .model import ClipboardSnapshot


class Renderer(Protocol):
    def render(self, source: str, display_mode: bool = True) -> str:
        ...


class InputInjector(Protocol):
    def simulate_copy(self) -> None:
        ...

    def simulate_paste(self) -> None:
        ...


class Clipboard(Protocol):
    def available_flavors(self) -> List[str]:
        ...

    def read_flavor(self, flavor: str) -> Optional[bytes]:
        ...

    def write_flavor(self, flavor: str, data: bytes) -> None:
        ...

    def clear(self) -> None:
        ...

    def revision_counter(self) -> int:
        ...

    def snapshot_all(self) -> ClipboardSnapshot:
        ...

    def restore(self, snapshot: ClipboardSnapshot) -> None:
        ...

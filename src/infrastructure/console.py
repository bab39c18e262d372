import sys
from typing import TextIO

from domain.events import DisplayEvent


class ConsoleDisplay:
    """Imprime cada evento de reprodução como uma linha no terminal."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream: TextIO = stream or sys.stdout

    def __call__(self, event: DisplayEvent) -> None:
        print(event.render(), file=self.stream, flush=True)

import threading
from collections.abc import Callable
from typing_extensions import override

import pytest

from application.interpreter import Interpreter
from domain.events import DisplayEvent
from domain.models import PlaybackSettings
from domain.parser import SongParser
from infrastructure.audio_driver import AudioDriver


class RecordingDriver(AudioDriver):
    """Driver that records calls instead of sleeping or making sound."""

    def __init__(
        self,
        stop_request: threading.Event | None = None,
        stop_after_notes: int | None = None,
    ) -> None:
        super().__init__(stop_request)
        self.tones: list[tuple[float, float]] = []
        self.rests: list[float] = []
        self.waits: list[float] = []
        self.stop_after_notes: int | None = stop_after_notes

    @property
    def notes_played(self) -> int:
        return len(self.tones) + len(self.rests)

    @override
    def tone(self, frequency: float, duration: float) -> None:
        self.tones.append((frequency, duration))
        self._maybe_stop()

    @override
    def rest(self, duration: float) -> None:
        self.rests.append(duration)
        self._maybe_stop()

    @override
    def wait(self, seconds: float) -> bool:
        self.waits.append(seconds)
        return self.stop_request.is_set()

    def _maybe_stop(self) -> None:
        if self.stop_after_notes is not None and self.notes_played >= self.stop_after_notes:
            self.stop_request.set()


@pytest.fixture
def driver() -> RecordingDriver:
    return RecordingDriver()


@pytest.fixture
def events() -> list[DisplayEvent]:
    return []


@pytest.fixture
def perform(
    driver: RecordingDriver, events: list[DisplayEvent]
) -> Callable[..., Interpreter]:
    """Compile a score and play it from `Song` with the recording driver."""

    def _perform(text: str, settings: PlaybackSettings | None = None) -> Interpreter:
        program = SongParser().parse(text)
        interpreter = Interpreter(
            program=program,
            driver=driver,
            settings=settings,
            on_event=events.append,
        )
        interpreter.run()
        return interpreter

    return _perform


@pytest.fixture
def driver_factory() -> type[RecordingDriver]:
    return RecordingDriver

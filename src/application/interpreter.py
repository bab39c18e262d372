import logging
from collections.abc import Callable

from config import SONG_SECTION
from domain.errors import PlaybackStopped
from domain.events import (
    CommentEvent,
    DisplayEvent,
    NoteEvent,
    NoticeEvent,
    SectionEvent,
    TempoEvent,
)
from domain.models import PerformanceState, PlaybackSettings
from domain.program import (
    Action,
    DivideTempo,
    LoopSection,
    MultiplyTempo,
    OctaveDown,
    OctaveShift,
    OctaveUp,
    PlayNote,
    PlaySection,
    PrintLine,
    Program,
    RepeatSection,
    SetDuration,
    SetOctave,
    SetTempo,
)
from domain.theory import frequency, note_duration, pause_seconds
from infrastructure.audio_driver import AudioDriver

logger = logging.getLogger(__name__)

STOPPED_MESSAGE = 'Song stopped'


class Interpreter:
    """Executa um `Program` compilado contra um estado de performance.

    As seções são tocadas de forma síncrona e recursiva. Não há proteção
    contra ciclos: uma seção que toca a si mesma sem `loop` recursa até
    estourar o limite de recursão do Python.
    """

    def __init__(
        self,
        program: Program,
        driver: AudioDriver,
        settings: PlaybackSettings | None = None,
        on_event: Callable[[DisplayEvent], None] | None = None,
    ) -> None:
        self.program: Program = program
        self.driver: AudioDriver = driver
        self.state: PerformanceState = PerformanceState(settings or PlaybackSettings())
        self.event_callback: Callable[[DisplayEvent], None] | None = on_event

    def run(self, section: str = SONG_SECTION) -> None:
        """Anunciar o tempo inicial e tocar a música a partir da seção dada."""
        self._emit(TempoEvent(bpm=self.state.display_tempo))
        self.play_section(section)

    def play_section(self, name: str) -> None:
        # seções sem notas também precisam ver o pedido de parada
        if self.driver.stop_request.is_set():
            self._stop()

        section = self.program.lookup(name)
        if section is None:
            logger.debug('Seção %r não definida; nada a tocar', name)
            self._emit(SectionEvent(name=name))
            return

        self._emit(SectionEvent(name=section.name))
        for action in section.actions:
            self.execute(action)

    def repeat_section(self, times: int, name: str) -> None:
        for _ in range(times):
            self.play_section(name)

    def loop_section(self, name: str) -> None:
        """Tocar a seção sem fim; só termina por cancelamento ou erro."""
        while True:
            self.play_section(name)

    def execute(self, action: Action) -> None:
        """Despacha a ação para o manipulador correto."""
        match action:
            case PrintLine(text=text):
                self._emit(CommentEvent(comment=text))
            case PlayNote():
                self._play_note(action)
            case PlaySection(name=name):
                self.play_section(name)
            case LoopSection(name=name):
                self.loop_section(name)
            case RepeatSection(count=count, name=name):
                self.repeat_section(count, name)
            case SetTempo(value=value):
                self._set_tempo(value)
            case MultiplyTempo(factor=factor):
                self._set_tempo(self.state.tempo * factor)
            case DivideTempo(factor=factor):
                self._set_tempo(self.state.tempo / factor)
            case SetDuration(value=value):
                self.state.duration = value
            case SetOctave(value=value):
                self.state.octave = value
            case OctaveUp():
                self.state.octave += 1
            case OctaveDown():
                self.state.octave -= 1
            case OctaveShift(delta=delta):
                self.state.octave += delta
            case _:
                raise TypeError(f'Unknown action {action!r}')

    def _set_tempo(self, tempo: float) -> None:
        self.state.tempo = tempo
        self._emit(TempoEvent(bpm=self.state.display_tempo))

    def _play_note(self, action: PlayNote) -> None:
        pitch = action.pitch
        octave = '' if pitch.is_rest else str(
            self.state.octave if pitch.octave is None else pitch.octave
        )
        self._emit(
            NoteEvent(
                name=pitch.name,
                octave=octave,
                duration=action.duration or str(self.state.duration),
            )
        )

        hz = frequency(pitch, self.state.octave)
        seconds = note_duration(action.duration, self.state)
        try:
            self.driver.emit(hz, seconds)
            if self.driver.stop_request.is_set():
                self._stop()
            if self.driver.wait(pause_seconds(self.state.tempo)):
                self._stop()
        except KeyboardInterrupt:
            self._stop()

    def _stop(self) -> None:
        self._emit(NoticeEvent(message=STOPPED_MESSAGE))
        raise PlaybackStopped(STOPPED_MESSAGE)

    def _emit(self, event: DisplayEvent) -> None:
        if self.event_callback:
            self.event_callback(event)

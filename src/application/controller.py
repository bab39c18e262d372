import logging
from collections.abc import Callable

from application.interpreter import Interpreter
from application.playback import PlaybackThread
from config import SONG_SECTION
from domain.events import DisplayEvent
from domain.models import PlaybackSettings
from domain.parser import SongParser
from domain.program import Program
from infrastructure.audio_driver import AudioDriver

logger = logging.getLogger(__name__)

JOIN_INTERVAL = 0.1


class MusicController:
    def __init__(
        self,
        driver: AudioDriver,
        on_event: Callable[[DisplayEvent], None] | None = None,
    ) -> None:
        self.parser: SongParser = SongParser()
        self.driver: AudioDriver = driver
        self.event_callback: Callable[[DisplayEvent], None] | None = on_event
        self.current_player: PlaybackThread | None = None

    def compile(self, text: str) -> Program:
        """Compilar o texto; erros de sintaxe sobem para quem chamou."""
        return self.parser.parse(text)

    def play_music(
        self,
        text: str,
        settings: PlaybackSettings,
        section: str = SONG_SECTION,
        on_finished_callback: Callable[[], None] | None = None,
    ) -> None:
        """Analisa o texto e inicia a reprodução."""
        self.stop_music()

        program = self.compile(text)
        self.play_program(program, settings, section, on_finished_callback)

    def play_program(
        self,
        program: Program,
        settings: PlaybackSettings,
        section: str = SONG_SECTION,
        on_finished_callback: Callable[[], None] | None = None,
    ) -> None:
        """Inicia a reprodução de um programa já compilado."""
        self.stop_music()
        self.driver.stop_request.clear()

        interpreter = Interpreter(
            program=program,
            driver=self.driver,
            settings=settings,
            on_event=self.event_callback,
        )
        self.current_player = PlaybackThread(
            interpreter=interpreter,
            section=section,
            on_finished_callback=on_finished_callback,
        )
        self.current_player.start()

    def stop_music(self) -> None:
        """Para a reprodução atual se estiver ativa."""
        if self.current_player and self.current_player.is_alive():
            self.current_player.stop()
            self.current_player.join(timeout=1.0)
        self.current_player = None

    def request_stop(self) -> None:
        """Pede a parada sem aguardar; use `wait` para o resultado."""
        if self.current_player:
            self.current_player.stop()

    @property
    def is_playing(self) -> bool:
        return self.current_player is not None and self.current_player.is_alive()

    def wait(self) -> bool:
        """Aguarda o fim da reprodução.

        Retorna True se a música foi interrompida e relança o erro fatal
        que tenha encerrado a thread.
        """
        player = self.current_player
        if player is None:
            return False

        # join com intervalo para que Ctrl+C chegue à thread principal
        while player.is_alive():
            player.join(timeout=JOIN_INTERVAL)

        if player.error is not None:
            raise player.error
        return player.stopped

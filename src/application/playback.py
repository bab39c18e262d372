import logging
import threading
from collections.abc import Callable
from typing_extensions import override

from application.interpreter import Interpreter
from config import SONG_SECTION
from domain.errors import PlaybackError, PlaybackStopped

logger = logging.getLogger(__name__)


class PlaybackThread(threading.Thread):
    """Executa a música em tempo real em uma thread separada."""

    def __init__(
        self,
        interpreter: Interpreter,
        section: str = SONG_SECTION,
        on_finished_callback: Callable[[], None] | None = None,
    ) -> None:
        super().__init__(daemon=True)
        self.interpreter: Interpreter = interpreter
        self.section: str = section
        self._stop_request: threading.Event = interpreter.driver.stop_request
        self.stop_callback: Callable[[], None] | None = on_finished_callback
        self.error: Exception | None = None
        self.stopped: bool = False

    @override
    def run(self) -> None:
        try:
            self.interpreter.run(self.section)
        except PlaybackStopped:
            self.stopped = True
        except PlaybackError as error:
            logger.error('Erro fatal durante a reprodução: %s', error)
            self.error = error
        except Exception as error:
            logger.exception('Erro inesperado durante a reprodução')
            self.error = error
        finally:
            self.notify_stop()

    def stop(self) -> None:
        """Sinalizar a thread para parar."""
        self._stop_request.set()

    def notify_stop(self) -> None:
        """Notificar quem iniciou a reprodução que a música terminou."""
        if self.stop_callback:
            self.stop_callback()

import logging
import os
import signal
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from typing import TextIO
from typing_extensions import override

from config import BELL_LENGTH_SCALE, BELL_VOLUME, REST_THRESHOLD_HZ
from domain.errors import AudioDriverError

logger = logging.getLogger(__name__)


class AudioDriver(ABC):
    """Dispositivo que transforma (frequência, duração) em som ou silêncio.

    Toda espera passa por `stop_request`, de modo que um pedido de parada
    interrompe a nota ou a pausa em andamento.
    """

    def __init__(self, stop_request: threading.Event | None = None) -> None:
        self.stop_request: threading.Event = stop_request or threading.Event()

    def emit(self, frequency: float, duration: float) -> None:
        """Tocar a frequência pela duração dada; abaixo do limiar, silenciar."""
        if frequency < REST_THRESHOLD_HZ:
            self.rest(duration)
        else:
            self.tone(frequency, duration)

    def rest(self, duration: float) -> None:
        self.wait(duration)

    @abstractmethod
    def tone(self, frequency: float, duration: float) -> None:
        """Emitir um tom audível."""

    def wait(self, seconds: float) -> bool:
        """Aguardar; retorna True se a parada foi pedida durante a espera."""
        return self.stop_request.wait(seconds)

    def close(self) -> None:
        """Restaurar qualquer estado alterado do terminal ou do beeper."""


class SilentDriver(AudioDriver):
    """Não emite som; apenas respeita o tempo de cada nota."""

    @override
    def tone(self, frequency: float, duration: float) -> None:
        self.wait(duration)


class TerminalBellDriver(AudioDriver):
    """Afina o sino do terminal (setterm/xset) e o toca a cada nota."""

    def __init__(
        self,
        stop_request: threading.Event | None = None,
        term: str | None = None,
        stream: TextIO | None = None,
    ) -> None:
        super().__init__(stop_request)
        self.term: str = os.environ.get('TERM', '') if term is None else term
        self.stream: TextIO = stream or sys.stdout
        self._missing_commands: set[str] = set()

    @property
    def is_linux_console(self) -> bool:
        return self.term == 'linux'

    @override
    def tone(self, frequency: float, duration: float) -> None:
        length_ms = int(duration * 1_000 * BELL_LENGTH_SCALE)

        if self.is_linux_console:
            self._configure_bell(['setterm', '-blength', str(length_ms)])
            self._configure_bell(['setterm', '-bfreq', str(int(frequency))])
        else:
            self._configure_bell(
                ['xset', 'b', str(BELL_VOLUME), str(int(frequency)), str(length_ms)]
            )

        self.stream.write('\a')
        self.stream.flush()
        self.wait(duration)

    @override
    def close(self) -> None:
        if self.is_linux_console:
            self._configure_bell(['setterm', '-blength', '0'])
        else:
            self._configure_bell(['xset', 'b', '0'])

    def _configure_bell(self, command: list[str]) -> None:
        # setterm escreve sequências de escape no stdout; não capturar
        self.stream.flush()
        logger.debug('Executando %s', ' '.join(command))
        try:
            _ = subprocess.run(command, check=False)
        except FileNotFoundError:
            if command[0] not in self._missing_commands:
                self._missing_commands.add(command[0])
                logger.warning(
                    'Comando %s não encontrado; o sino tocará sem afinação',
                    command[0],
                )


class BeepCommandDriver(AudioDriver):
    """Usa o utilitário `beep` do Linux (opcionalmente via sudo)."""

    def __init__(
        self,
        stop_request: threading.Event | None = None,
        use_sudo: bool = False,
    ) -> None:
        super().__init__(stop_request)
        self.use_sudo: bool = use_sudo

    def build_command(self, frequency: float, duration: float) -> list[str]:
        command = [
            'beep',
            '-f',
            f'{frequency:.2f}',
            '-l',
            str(int(duration * 1_000)),  # segundos -> milissegundos
        ]
        if self.use_sudo:
            command.insert(0, 'sudo')
        return command

    @override
    def tone(self, frequency: float, duration: float) -> None:
        command = self.build_command(frequency, duration)
        logger.debug('Executando %s', ' '.join(command))
        try:
            _ = subprocess.run(command, check=True)
        except subprocess.CalledProcessError as error:
            # Ctrl+C também chega ao beep, que está no mesmo grupo de processos
            if self.stop_request.is_set() or error.returncode == -signal.SIGINT:
                logger.debug('beep interrompido: %s', error)
                self.stop_request.set()
                return
            logger.exception('Erro ao executar o beep')
            raise AudioDriverError(f'Could not run {command[0]}: {error}') from error
        except OSError as error:
            logger.exception('Erro ao executar o beep')
            raise AudioDriverError(f'Could not run {command[0]}: {error}') from error

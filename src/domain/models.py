from dataclasses import dataclass

from config import (
    DEFAULT_DURATION,
    DEFAULT_OCTAVE,
    DEFAULT_TEMPO,
    MAX_OCTAVE,
    MIN_OCTAVE,
)
from domain.errors import OctaveOutOfRange


@dataclass
class PlaybackSettings:
    """Configuração inicial definida pelo usuário na linha de comando."""

    tempo: float = DEFAULT_TEMPO
    octave: int = DEFAULT_OCTAVE
    duration: int = DEFAULT_DURATION


class PerformanceState:
    """Estado vivo da performance (tempo, oitava e duração padrão).

    Uma instância por reprodução, compartilhada por referência entre todas
    as seções tocadas.
    """

    def __init__(self, settings: PlaybackSettings) -> None:
        self.tempo: float = float(settings.tempo)
        self.duration: int = settings.duration
        self._octave: int = DEFAULT_OCTAVE
        self.octave = settings.octave

    @property
    def octave(self) -> int:
        return self._octave

    @octave.setter
    def octave(self, octave: int) -> None:
        if not MIN_OCTAVE <= octave <= MAX_OCTAVE:
            raise OctaveOutOfRange(octave)
        self._octave = octave

    @property
    def display_tempo(self) -> int:
        """Parte inteira do tempo, a única exibida ao usuário."""
        return int(self.tempo)

import winsound
from typing import Final
from typing_extensions import override

from infrastructure.audio_driver import AudioDriver

# Faixa aceita por winsound.Beep
MIN_BEEP_HZ: Final[int] = 37
MAX_BEEP_HZ: Final[int] = 32_767


class WinsoundDriver(AudioDriver):
    """Beep do alto-falante via kernel32 no Windows."""

    @override
    def tone(self, frequency: float, duration: float) -> None:
        hz = max(MIN_BEEP_HZ, min(MAX_BEEP_HZ, int(frequency)))
        winsound.Beep(hz, int(duration * 1_000))

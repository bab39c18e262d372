import logging
import threading
from pathlib import Path
from typing_extensions import override

import fluidsynth

from config import DEFAULT_INSTRUMENT, DEFAULT_VELOCITY, MAX_MIDI_VALUE
from domain.errors import AudioDriverError
from domain.theory import nearest_midi_key
from infrastructure.audio_driver import AudioDriver

logger = logging.getLogger(__name__)


class FluidSynthPlayer(AudioDriver):
    """Toca cada nota na tecla MIDI mais próxima usando um SoundFont."""

    def __init__(
        self,
        soundfont_path: Path,
        instrument_id: int = DEFAULT_INSTRUMENT,
        stop_request: threading.Event | None = None,
    ) -> None:
        super().__init__(stop_request)
        self.fs: fluidsynth.Synth = fluidsynth.Synth()
        self.soundfont_path: Path = soundfont_path
        self.instrument_id: int = instrument_id
        self.channel: int = 0
        self._initialize_fluidsynth()

    def _initialize_fluidsynth(self) -> None:
        try:
            self.fs.start()
            if self.fs.sfload(str(self.soundfont_path)) == -1:
                raise OSError(f'Could not load SoundFont {self.soundfont_path}')
            self.fs.program_change(chan=self.channel, prg=self.instrument_id)
        except Exception as error:
            logger.exception('Erro ao inicializar o FluidSynth')
            self.fs.delete()
            raise AudioDriverError(str(error)) from error

    @override
    def tone(self, frequency: float, duration: float) -> None:
        key = max(0, min(MAX_MIDI_VALUE, nearest_midi_key(frequency)))
        self.fs.noteon(chan=self.channel, key=key, vel=DEFAULT_VELOCITY)
        try:
            self.wait(duration)
        finally:
            self.fs.noteoff(chan=self.channel, key=key)

    @override
    def close(self) -> None:
        self.fs.delete()

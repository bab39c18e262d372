"""Aritmética musical: nomes de nota, frequências e durações."""

import math
from dataclasses import dataclass

from config import (
    ACCIDENTAL_OFFSETS,
    CHROMATIC_SCALE,
    MAX_OCTAVE,
    PAUSE_DENOMINATOR,
    REFERENCE_FREQUENCY,
    REFERENCE_LETTER,
    REFERENCE_OCTAVE,
    REST_SYMBOL,
    STACCATO_PAUSE_DENOMINATOR,
)
from domain.errors import MalformedPitch
from domain.models import PerformanceState

ACCIDENTALS = '#b'


@dataclass(frozen=True)
class Pitch:
    """Nota já separada em letra, acidente e oitava (None = oitava atual)."""

    letter: str
    accidental: str = ''
    octave: int | None = None

    @property
    def is_rest(self) -> bool:
        return self.letter == REST_SYMBOL

    @property
    def name(self) -> str:
        return self.letter + self.accidental

    def __str__(self) -> str:
        octave = '' if self.octave is None else str(self.octave)
        return f'{self.name}{octave}'


REST = Pitch(REST_SYMBOL)


def parse_pitch(token: str) -> Pitch:
    """Separar um nome como `C#4`, `Eb` ou `G5` em letra, acidente e oitava."""
    if len(token) < 1:
        raise MalformedPitch(token, 'too small')
    if len(token) > 3:
        raise MalformedPitch(token, 'too big')

    if token == REST_SYMBOL:
        return REST

    letter = token[0]
    if letter == REST_SYMBOL:
        raise MalformedPitch(token, 'a rest with extra characters')
    if letter not in CHROMATIC_SCALE:
        raise MalformedPitch(token, 'not a note name')

    accidental = ''
    octave_char = ''
    if len(token) == 3:
        accidental, octave_char = token[1], token[2]
    elif len(token) == 2:
        if token[1] in ACCIDENTALS:
            accidental = token[1]
        else:
            octave_char = token[1]

    if accidental and accidental not in ACCIDENTALS:
        raise MalformedPitch(token, 'not a valid accidental')
    if octave_char and not (octave_char.isdigit() and int(octave_char) <= MAX_OCTAVE):
        raise MalformedPitch(token, 'not a valid octave')

    return Pitch(
        letter=letter,
        accidental=accidental,
        octave=int(octave_char) if octave_char else None,
    )


def semitone_index(letter: str) -> int:
    """Posição da nota (com acidente, se houver) na escala cromática."""
    if letter == REST_SYMBOL:
        raise ValueError('A rest has no semitone index')
    return CHROMATIC_SCALE.index(letter)


def absolute_semitone(pitch: Pitch, current_octave: int) -> int:
    octave = current_octave if pitch.octave is None else pitch.octave
    return (
        octave * 12
        + semitone_index(pitch.letter)
        + ACCIDENTAL_OFFSETS[pitch.accidental]
    )


_REFERENCE_SEMITONE = absolute_semitone(
    Pitch(REFERENCE_LETTER, octave=REFERENCE_OCTAVE), REFERENCE_OCTAVE
)


def frequency(pitch: Pitch | str, current_octave: int = REFERENCE_OCTAVE) -> float:
    """Frequência em Hz no temperamento igual (A4 = 440 Hz); pausa vale 0."""
    if isinstance(pitch, str):
        pitch = parse_pitch(pitch)
    if pitch.is_rest:
        return 0.0

    above_reference = absolute_semitone(pitch, current_octave) - _REFERENCE_SEMITONE
    return 2 ** (above_reference / 12) * REFERENCE_FREQUENCY


def nearest_midi_key(frequency_hz: float) -> int:
    """Tecla MIDI mais próxima da frequência (69 = A4)."""
    return round(69 + 12 * math.log2(frequency_hz / REFERENCE_FREQUENCY))


# 1  => 4    batidas
# 2  => 2    batidas
# 4  => 1    batida
# 8  => 0.50 batidas
# 16 => 0.25 batidas
def beat_seconds(denominator: int, tempo: float) -> float:
    return (4 / denominator) / tempo * 60


def split_duration(expression: str) -> list[int]:
    return [int(part) for part in expression.split('+')]


def note_duration(expression: str | None, state: PerformanceState) -> float:
    """Duração em segundos; sem expressão, usa a duração padrão do estado."""
    if expression is None:
        return beat_seconds(state.duration, state.tempo)
    return sum(
        beat_seconds(denominator, state.tempo)
        for denominator in split_duration(expression)
    )


def pause_seconds(tempo: float) -> float:
    return beat_seconds(PAUSE_DENOMINATOR, tempo)


def staccato_pause_seconds(tempo: float) -> float:
    return beat_seconds(STACCATO_PAUSE_DENOMINATOR, tempo)

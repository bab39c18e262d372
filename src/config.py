from pathlib import Path
from typing import Final

# Prefixos dos eventos exibidos durante a reprodução
COMMENT_PREFIX: Final[str] = '## '
TEMPO_PREFIX: Final[str] = ':: '
NOTE_PREFIX: Final[str] = '>> '
SECTION_PREFIX: Final[str] = '@@ '
IMPORTANT_PREFIX: Final[str] = '!! '
SYNTAX_ERROR_PREFIX: Final[str] = 'XX '

# Seção implícita antes de qualquer cabeçalho `[Nome]`
SONG_SECTION: Final[str] = 'Song'

# Estado inicial da performance
DEFAULT_TEMPO: Final[int] = 120
DEFAULT_OCTAVE: Final[int] = 4
DEFAULT_DURATION: Final[int] = 4

MIN_OCTAVE: Final[int] = 0
MAX_OCTAVE: Final[int] = 8

# Temperamento igual referenciado em A4 = 440 Hz
REFERENCE_FREQUENCY: Final[float] = 440.0
REFERENCE_LETTER: Final[str] = 'A'
REFERENCE_OCTAVE: Final[int] = 4

CHROMATIC_SCALE: Final[tuple[str, ...]] = (
    'C',
    'C#',
    'D',
    'D#',
    'E',
    'F',
    'F#',
    'G',
    'G#',
    'A',
    'A#',
    'B',
)

REST_SYMBOL: Final[str] = 'R'
ACCIDENTAL_OFFSETS: Final[dict[str, int]] = {'b': -1, '#': 1, '': 0}

# Abaixo disso a frequência é tratada como pausa
REST_THRESHOLD_HZ: Final[float] = 5.0

# Pausa entre notas (1/128) e pausa curta de staccato (1/64)
PAUSE_DENOMINATOR: Final[int] = 128
STACCATO_PAUSE_DENOMINATOR: Final[int] = 64

# Fração da nota usada como comprimento do sino do terminal
BELL_LENGTH_SCALE: Final[float] = 0.45
BELL_VOLUME: Final[int] = 100

# Caminho padrão para o SoundFont
DEFAULT_SOUNDFONT = Path('FluidR3_GM.sf2')

# Lead 1 (square), o timbre General MIDI mais próximo de um beep
DEFAULT_INSTRUMENT: Final[int] = 80
DEFAULT_VELOCITY: Final[int] = 100
MAX_MIDI_VALUE: Final[int] = 127

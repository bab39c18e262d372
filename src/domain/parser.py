import logging
import re
from collections.abc import Callable, Iterable
from typing import Final, TypeAlias

from config import SONG_SECTION
from domain.errors import MalformedPitch, NotationSyntaxError
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
from domain.theory import parse_pitch, split_duration

logger = logging.getLogger(__name__)

CommandHandler: TypeAlias = Callable[[re.Match[str]], list[Action]]

COMMENT_MARKER: Final[str] = '#'
COMMAND_SEPARATOR: Final[str] = ';'

SECTION_HEADER_REGEX: Final[re.Pattern[str]] = re.compile(r'^\s*\[([^\[\];]+)\]\s*$')
COMMENT_REGEX: Final[re.Pattern[str]] = re.compile(r'^# ?')

_PITCH = r'[RA-G][#b]?\d?'
_DURATION = r'\d+(?:\+\d+)*'
_NOTE = rf'(?P<pitch>{_PITCH})(?:(?:\s*,\s*|\s+)(?P<duration>{_DURATION}))?'

NOTE_REGEX: Final[re.Pattern[str]] = re.compile(_NOTE)
NOTE_SEQUENCE_REGEX: Final[re.Pattern[str]] = re.compile(
    rf'^{_PITCH}(?:(?:\s*,\s*|\s+){_DURATION})?'
    rf'(?:\s+{_PITCH}(?:(?:\s*,\s*|\s+){_DURATION})?)*$'
)


class SongParser:
    """Compila o texto-fonte em um `Program` de seções e ações.

    Cada linha é lida uma única vez, sem olhar adiante; nada é executado
    durante a compilação.
    """

    def __init__(self) -> None:
        self.command_table: list[tuple[re.Pattern[str], CommandHandler]] = (
            self._build_command_table()
        )

    def _build_command_table(self) -> list[tuple[re.Pattern[str], CommandHandler]]:
        """Construir a tabela ordenada Padrão -> Função (vence o primeiro)."""
        ignore_case = re.IGNORECASE
        return [
            (re.compile(r'^play\s+([^\[\]]+)$', ignore_case), self._handle_play),
            (re.compile(r'^loop\s+([^\[\]]+)$', ignore_case), self._handle_loop),
            (re.compile(r'^repeat\s+(\d+)\s+([^\[\]]+)$', ignore_case), self._handle_repeat),
            (re.compile(r'^tempo(?:\s+|\s*=\s*)(\d+)$', ignore_case), self._handle_tempo),
            (re.compile(r'^tempo\s*\*\s*(\d+)$', ignore_case), self._handle_tempo_multiply),
            (re.compile(r'^tempo\s*/\s*(\d+)$', ignore_case), self._handle_tempo_divide),
            (re.compile(r'^duration(?:\s+|\s*=\s*)(\d+)$', ignore_case), self._handle_duration),
            (
                re.compile(r'^octave(?:\s+|\s*=\s*)(up|down|\d+)$', ignore_case),
                self._handle_octave,
            ),
            (NOTE_SEQUENCE_REGEX, self._handle_notes),
            (re.compile(r'^[+-][\s+-]*$'), self._handle_octave_shift),
        ]

    def parse(self, text: str) -> Program:
        return self.parse_lines(text.splitlines())

    def parse_lines(self, lines: Iterable[str]) -> Program:
        """Compilar as linhas em ordem; a primeira linha inválida aborta tudo."""
        program = Program()
        section = SONG_SECTION

        for line_number, raw_line in enumerate(lines, start=1):
            line = raw_line.rstrip('\r\n')

            if line.startswith(COMMENT_MARKER):
                program.append(section, PrintLine(COMMENT_REGEX.sub('', line, count=1)))
                continue

            if not line.strip():
                continue

            if header := SECTION_HEADER_REGEX.match(line):
                section = header.group(1).strip()
                continue

            for command in line.split(COMMAND_SEPARATOR):
                command = command.strip()
                if not command:
                    continue
                for action in self._compile_command(command, line_number):
                    program.append(section, action)

        logger.debug('Programa compilado: %s', program.summary())
        return program

    def _compile_command(self, command: str, line_number: int) -> list[Action]:
        for pattern, handler in self.command_table:
            match = pattern.match(command)
            if not match:
                continue
            try:
                return handler(match)
            except (MalformedPitch, ValueError) as error:
                raise NotationSyntaxError(line_number, command) from error

        raise NotationSyntaxError(line_number, command)

    def _handle_play(self, match: re.Match[str]) -> list[Action]:
        return [PlaySection(match.group(1).strip())]

    def _handle_loop(self, match: re.Match[str]) -> list[Action]:
        return [LoopSection(match.group(1).strip())]

    def _handle_repeat(self, match: re.Match[str]) -> list[Action]:
        return [RepeatSection(count=int(match.group(1)), name=match.group(2).strip())]

    def _handle_tempo(self, match: re.Match[str]) -> list[Action]:
        return [SetTempo(float(self._positive(match.group(1))))]

    def _handle_tempo_multiply(self, match: re.Match[str]) -> list[Action]:
        return [MultiplyTempo(float(self._positive(match.group(1))))]

    def _handle_tempo_divide(self, match: re.Match[str]) -> list[Action]:
        return [DivideTempo(float(self._positive(match.group(1))))]

    def _handle_duration(self, match: re.Match[str]) -> list[Action]:
        return [SetDuration(self._positive(match.group(1)))]

    def _handle_octave(self, match: re.Match[str]) -> list[Action]:
        value = match.group(1).lower()
        match value:
            case 'up':
                return [OctaveUp()]
            case 'down':
                return [OctaveDown()]
            case _:
                return [SetOctave(int(value))]

    def _handle_notes(self, match: re.Match[str]) -> list[Action]:
        actions: list[Action] = []
        for note in NOTE_REGEX.finditer(match.group()):
            duration = note.group('duration')
            if duration is not None:
                for denominator in split_duration(duration):
                    self._positive(str(denominator))
            actions.append(PlayNote(pitch=parse_pitch(note.group('pitch')), duration=duration))
        return actions

    def _handle_octave_shift(self, match: re.Match[str]) -> list[Action]:
        shift = match.group()
        return [OctaveShift(shift.count('+') - shift.count('-'))]

    def _positive(self, value: str) -> int:
        number = int(value)
        if number <= 0:
            raise ValueError(f'{value} must be positive')
        return number

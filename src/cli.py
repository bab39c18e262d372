"""Linha de comando: compila uma música em texto e a toca no beeper."""

import argparse
import logging
import math
import signal
import sys
import threading
from pathlib import Path
from types import FrameType

from application.controller import MusicController
from config import (
    DEFAULT_DURATION,
    DEFAULT_INSTRUMENT,
    DEFAULT_OCTAVE,
    DEFAULT_SOUNDFONT,
    DEFAULT_TEMPO,
    SONG_SECTION,
)
from domain.errors import NotationSyntaxError, PlaybackError
from domain.events import NoticeEvent, SyntaxErrorEvent
from domain.models import PlaybackSettings
from infrastructure.audio_driver import (
    AudioDriver,
    BeepCommandDriver,
    SilentDriver,
    TerminalBellDriver,
)
from infrastructure.console import ConsoleDisplay

logger = logging.getLogger(__name__)

DRIVERS = ('bell', 'beep', 'silent', 'fluidsynth', 'winsound')
DEFAULT_DRIVER = 'winsound' if sys.platform == 'win32' else 'bell'


def positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{value!r} is not a number') from None
    if not math.isfinite(number) or number <= 0:
        raise argparse.ArgumentTypeError(f'{value} must be greater than zero')
    return number


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'{value!r} is not an integer') from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f'{value} must be greater than zero')
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='txt2beep',
        description='Play a text score (notes, sections, loops) on the system beeper.',
    )
    parser.add_argument(
        'file',
        nargs='?',
        default='-',
        help='score file to play (default: read from standard input)',
    )
    parser.add_argument(
        '--driver',
        choices=DRIVERS,
        default=DEFAULT_DRIVER,
        help=f'audio output (default: {DEFAULT_DRIVER})',
    )
    parser.add_argument(
        '--beep',
        dest='driver',
        action='store_const',
        const='beep',
        help='shortcut for --driver beep',
    )
    parser.add_argument('--sudo', action='store_true', help='run the beep command through sudo')
    parser.add_argument(
        '--soundfont',
        type=Path,
        default=DEFAULT_SOUNDFONT,
        help='SoundFont used by the fluidsynth driver',
    )
    parser.add_argument(
        '--instrument',
        type=int,
        default=DEFAULT_INSTRUMENT,
        help='General MIDI program used by the fluidsynth driver',
    )
    parser.add_argument(
        '--tempo', type=positive_float, default=DEFAULT_TEMPO, help='initial tempo (BPM)'
    )
    parser.add_argument('--octave', type=int, default=DEFAULT_OCTAVE, help='initial octave (0-8)')
    parser.add_argument(
        '--duration',
        type=positive_int,
        default=DEFAULT_DURATION,
        help='initial note length (4 = quarter)',
    )
    parser.add_argument(
        '--section', default=SONG_SECTION, help=f'section to start from (default: {SONG_SECTION})'
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help='only compile the score and list its sections',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='show debug logging')
    return parser


def build_driver(args: argparse.Namespace, stop_request: threading.Event) -> AudioDriver:
    """Criar o driver de áudio escolhido na linha de comando."""
    match args.driver:
        case 'beep':
            return BeepCommandDriver(stop_request=stop_request, use_sudo=args.sudo)
        case 'silent':
            return SilentDriver(stop_request=stop_request)
        case 'fluidsynth':
            from infrastructure.audio_player import FluidSynthPlayer

            return FluidSynthPlayer(
                soundfont_path=args.soundfont,
                instrument_id=args.instrument,
                stop_request=stop_request,
            )
        case 'winsound':
            from infrastructure.winsound_driver import WinsoundDriver

            return WinsoundDriver(stop_request=stop_request)
        case _:
            return TerminalBellDriver(stop_request=stop_request)


def read_source(file: str) -> str:
    if file == '-':
        return sys.stdin.read()
    return Path(file).read_text(encoding='utf-8')


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    display = ConsoleDisplay()
    stop_request = threading.Event()
    settings = PlaybackSettings(tempo=args.tempo, octave=args.octave, duration=args.duration)

    try:
        text = read_source(args.file)
    except OSError:
        logger.exception('Erro ao ler a partitura %s', args.file)
        return 1

    try:
        driver = build_driver(args, stop_request)
    except PlaybackError as error:
        display(NoticeEvent(message=str(error)))
        return 1

    controller = MusicController(driver=driver, on_event=display)

    def _on_terminate(_signum: int, _frame: FrameType | None) -> None:
        controller.request_stop()

    _ = signal.signal(signal.SIGTERM, _on_terminate)

    try:
        program = controller.compile(text)
        if args.check:
            for name, count in program.summary():
                print(f'{name}: {count} actions')
            return 0

        controller.play_program(program, settings, section=args.section)
        try:
            _ = controller.wait()
        except KeyboardInterrupt:
            controller.request_stop()
            _ = controller.wait()
    except NotationSyntaxError as error:
        display(SyntaxErrorEvent(line_number=error.line_number, command=error.command))
        return 1
    except PlaybackError as error:
        display(NoticeEvent(message=str(error)))
        return 1
    except RecursionError:
        logger.exception('Seções se chamam sem fim')
        return 1
    finally:
        driver.close()

    return 0


if __name__ == '__main__':
    sys.exit(main())

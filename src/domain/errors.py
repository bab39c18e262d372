class NotationError(Exception):
    """Erro encontrado ao compilar o texto da música."""


class MalformedPitch(NotationError):
    """Nome de nota vazio, longo demais ou com oitava inválida."""

    def __init__(self, token: str, reason: str) -> None:
        super().__init__(f"'{token}' is {reason}")
        self.token: str = token


class NotationSyntaxError(NotationError):
    """Comando que não corresponde a nenhuma gramática conhecida."""

    def __init__(self, line_number: int, command: str) -> None:
        super().__init__(f'Syntax error on line {line_number} near "{command}"')
        self.line_number: int = line_number
        self.command: str = command


class PlaybackError(Exception):
    """Condição fatal durante a reprodução."""


class OctaveOutOfRange(PlaybackError):
    def __init__(self, octave: int) -> None:
        super().__init__(f'Octave {octave} is out of range')
        self.octave: int = octave


class AudioDriverError(PlaybackError):
    """Falha do dispositivo de áudio ao emitir um som."""


class PlaybackStopped(Exception):  # noqa: N818
    """Reprodução interrompida pelo usuário (não é uma falha)."""

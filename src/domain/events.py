from dataclasses import dataclass
from typing import ClassVar
from typing_extensions import override

from config import (
    COMMENT_PREFIX,
    IMPORTANT_PREFIX,
    NOTE_PREFIX,
    SECTION_PREFIX,
    SYNTAX_ERROR_PREFIX,
    TEMPO_PREFIX,
)


@dataclass
class DisplayEvent:
    """Classe base para todos os eventos exibidos durante a reprodução."""

    PREFIX: ClassVar[str] = ''

    @property
    def text(self) -> str:
        raise NotImplementedError

    def render(self) -> str:
        """Linha completa, com o prefixo da categoria."""
        return f'{self.PREFIX}{self.text}'


@dataclass
class CommentEvent(DisplayEvent):
    """Comentário do texto-fonte."""

    PREFIX: ClassVar[str] = COMMENT_PREFIX

    comment: str

    @property
    @override
    def text(self) -> str:
        return self.comment


@dataclass
class TempoEvent(DisplayEvent):
    """Evento de mudança de tempo (BPM)."""

    PREFIX: ClassVar[str] = TEMPO_PREFIX

    bpm: int

    @property
    @override
    def text(self) -> str:
        return f'Tempo {self.bpm}'


@dataclass
class NoteEvent(DisplayEvent):
    """Evento de nota musical."""

    PREFIX: ClassVar[str] = NOTE_PREFIX

    name: str
    octave: str
    duration: str

    @property
    @override
    def text(self) -> str:
        return f'{self.name:<2} {self.octave:>1} {self.duration}'


@dataclass
class SectionEvent(DisplayEvent):
    """Início da execução de uma seção."""

    PREFIX: ClassVar[str] = SECTION_PREFIX

    name: str

    @property
    @override
    def text(self) -> str:
        return self.name


@dataclass
class NoticeEvent(DisplayEvent):
    """Aviso importante ou fatal."""

    PREFIX: ClassVar[str] = IMPORTANT_PREFIX

    message: str

    @property
    @override
    def text(self) -> str:
        return self.message


@dataclass
class SyntaxErrorEvent(DisplayEvent):
    """Erro de sintaxe encontrado na compilação."""

    PREFIX: ClassVar[str] = SYNTAX_ERROR_PREFIX

    line_number: int
    command: str

    @property
    @override
    def text(self) -> str:
        return f'Syntax error on line {self.line_number} near "{self.command}"'

from collections.abc import Iterator
from dataclasses import dataclass, field

from domain.theory import Pitch


@dataclass(frozen=True)
class Action:
    """Classe base para todas as instruções compiladas de uma seção."""


@dataclass(frozen=True)
class PrintLine(Action):
    text: str


@dataclass(frozen=True)
class PlayNote(Action):
    pitch: Pitch
    duration: str | None = None


@dataclass(frozen=True)
class PlaySection(Action):
    name: str


@dataclass(frozen=True)
class LoopSection(Action):
    name: str


@dataclass(frozen=True)
class RepeatSection(Action):
    count: int
    name: str


@dataclass(frozen=True)
class SetTempo(Action):
    value: float


@dataclass(frozen=True)
class MultiplyTempo(Action):
    factor: float


@dataclass(frozen=True)
class DivideTempo(Action):
    factor: float


@dataclass(frozen=True)
class SetDuration(Action):
    value: int


@dataclass(frozen=True)
class SetOctave(Action):
    value: int


@dataclass(frozen=True)
class OctaveUp(Action):
    pass


@dataclass(frozen=True)
class OctaveDown(Action):
    pass


@dataclass(frozen=True)
class OctaveShift(Action):
    delta: int


@dataclass
class Section:
    """Seção nomeada; `name` guarda a grafia usada na primeira vez."""

    name: str
    actions: list[Action] = field(default_factory=list)


class Program:
    """Mapa de seções com nomes comparados sem diferenciar maiúsculas."""

    def __init__(self) -> None:
        self._sections: dict[str, Section] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def append(self, section_name: str, action: Action) -> None:
        """Acrescentar uma ação ao fim da seção, criando-a se necessário."""
        key = self._key(section_name)
        if key not in self._sections:
            self._sections[key] = Section(name=section_name)
        self._sections[key].actions.append(action)

    def lookup(self, section_name: str) -> Section | None:
        return self._sections.get(self._key(section_name))

    def summary(self) -> list[tuple[str, int]]:
        """Listar (nome, quantidade de ações) na ordem de definição."""
        return [(section.name, len(section.actions)) for section in self]

    def __contains__(self, section_name: object) -> bool:
        return isinstance(section_name, str) and self._key(section_name) in self._sections

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections.values())

    def __len__(self) -> int:
        return len(self._sections)

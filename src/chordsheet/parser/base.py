from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto


class FragmentKind(Enum):
    BLANK = auto()  # empty or whitespace only
    DIRECTIVE = auto()  # {name: value}
    CHORDS = auto()  # chord-only line: Am   C   G
    LYRICS = auto()  # everything else
    START_SECTION = auto()  # [Verse 1], [Chorus]
    END_SECTION = auto()  # implicit close of the open section
    COMMENT = auto()  # any other [Label]
    TAB = auto()  # tablature line: e|--0--1--3--|
    REPEAT = auto()  # chord line with a repetition marker: Am C G 2x


@dataclass(frozen=True)
class Fragment:
    """One typed piece of a classified line.

    ``text`` holds the raw line for BLANK/DIRECTIVE/CHORDS/LYRICS/TAB, the
    label for START_SECTION and COMMENT, and the chord text for REPEAT (whose
    aligned lyric text is in ``lyrics``).
    """

    kind: FragmentKind
    text: str = ""
    lyrics: str = ""
    section: str | None = None


@dataclass(frozen=True)
class SectionState:
    """What a classifier may know about the song being built."""

    section_type: str
    line_is_empty: bool = False  # a current line exists and holds nothing yet
    previous_line_is_empty: bool = True  # True when there is no previous line


class LineClassifier(ABC):
    """Abstract base class for chord sheet dialects."""

    # Dialect names this classifier is registered under.
    names: tuple[str, ...] = ()

    @classmethod
    def handles(cls, dialect: str) -> bool:
        return dialect.lower() in cls.names

    @abstractmethod
    def classify(self, raw_line: str, state: SectionState) -> tuple[Fragment, ...]:
        """Return the fragments *raw_line* stands for, in the order they apply.

        Must not modify anything: the caller applies the fragments.  Every
        line yields at least one fragment.
        """

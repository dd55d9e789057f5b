from dataclasses import dataclass, field

from . import constants as c
from .tag import Tag
from .theory import MusicTheory, default_theory


@dataclass(frozen=True)
class ChordLyricsPair:
    """A chord symbol and the lyric fragment sung from it.

    Either side may be empty: ``ChordLyricsPair("", "just lyrics")`` or
    ``ChordLyricsPair("Am", "")`` for an instrumental chord.
    """

    chords: str = ""
    lyrics: str = ""

    def has_chords(self) -> bool:
        return bool(self.chords.strip())

    def is_renderable(self) -> bool:
        return True

    def transpose(
        self, offset: int, target_key: str | None = None, theory: MusicTheory | None = None
    ) -> "ChordLyricsPair":
        """Return a copy with its chords moved *offset* semitones toward *target_key*."""
        if not self.has_chords():
            return self
        return (theory or default_theory).transpose(self, offset, target_key)


Item = Tag | ChordLyricsPair


@dataclass(frozen=True)
class ParserWarning:
    """A structural problem found while building a song.  Never raised."""

    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        return f"{self.message} on line {self.line} column {self.column}"


@dataclass
class Line:
    """An ordered run of items with the section and key context it was created in."""

    items: list[Item] = field(default_factory=list)
    type: str = c.NONE
    # Context snapshot; structural equality only looks at items and type.
    key: str | None = field(default=None, compare=False)
    transpose_key: str | None = field(default=None, compare=False)

    def add_item(self, item: Item) -> Item:
        self.items.append(item)
        return item

    def add_tag(self, name_or_tag: "str | Tag", value=None) -> Tag:
        if isinstance(name_or_tag, Tag):
            tag = name_or_tag
        elif value is not None:
            tag = Tag(name_or_tag, str(value))
        else:
            tag = Tag.parse(name_or_tag)
        return self.add_item(tag)

    def add_chord_lyrics_pair(self, chords: str | None = None, lyrics: str | None = None) -> ChordLyricsPair:
        return self.add_item(ChordLyricsPair(chords or "", lyrics or ""))

    def is_empty(self) -> bool:
        return not self.items

    def has_renderable_items(self) -> bool:
        return any(item.is_renderable() for item in self.items)

    def with_items(self, items: list[Item]) -> "Line":
        return Line(items=list(items), type=self.type, key=self.key, transpose_key=self.transpose_key)

    def is_verse(self) -> bool:
        return self.type == c.VERSE

    def is_chorus(self) -> bool:
        return self.type == c.CHORUS

    def is_tab(self) -> bool:
        return self.type == c.TAB


@dataclass
class Paragraph:
    """Consecutive renderable lines between two empty lines.  Derived, never stored."""

    lines: list[Line] = field(default_factory=list)

    def add_line(self, line: Line) -> None:
        self.lines.append(line)

    def is_empty(self) -> bool:
        return not self.lines

    def has_renderable_items(self) -> bool:
        return any(line.has_renderable_items() for line in self.lines)

    @property
    def type(self) -> str:
        types = {line.type for line in self.lines}
        if len(types) == 1:
            return types.pop()
        return c.INDETERMINATE

"""The :class:`Song` document root.

A Song is built line by line, either by :class:`~chordsheet.parser.cursor.ParseCursor`
or directly through :meth:`Song.add_line` / :meth:`Song.add_item`.  Once built,
every edit goes through :meth:`Song.map_items` or :meth:`Song.map_lines`, which
replay the song into a brand-new instance::

    song = ChordSheetParser().parse(text)
    in_d = song.set_key("D")          # song is left untouched
    no_capo = in_d.set_capo(None)
"""

import logging
from collections.abc import Callable, Mapping
from functools import cached_property

from . import constants as c
from .exceptions import SongStateError
from .metadata import Metadata
from .models import ChordLyricsPair, Item, Line, Paragraph, ParserWarning
from .tag import Tag
from .theory import MusicTheory, default_theory

logger = logging.getLogger(__name__)

_SECTION_STARTS = {tag: section for section, tag in c.START_SECTION_TAGS.items()}
_SECTION_ENDS = {tag: section for section, tag in c.END_SECTION_TAGS.items()}


class Song:
    """An ordered list of :class:`Line` objects plus metadata and parser warnings."""

    def __init__(self, metadata: "Mapping | Metadata | None" = None):
        self.lines: list[Line] = []
        self.metadata = Metadata(metadata)
        self.warnings: list[ParserWarning] = []

        # Construction state, only meaningful while the song is being built.
        self.current_line: Line | None = None
        self.section_type: str = c.NONE
        self.current_key: str | None = None
        self.transpose_key: str | None = None

        # Metadata that does not come from tags and must survive a replay.
        self._seed_metadata = Metadata(metadata)

    # ------------------------------------------------------------------
    # Metadata accessors
    # ------------------------------------------------------------------

    @property
    def title(self) -> str | None:
        return self.metadata.get_single(c.TITLE)

    @property
    def subtitle(self) -> str | None:
        return self.metadata.get_single(c.SUBTITLE)

    @property
    def artist(self) -> str | None:
        return self.metadata.get_single(c.ARTIST)

    @property
    def key(self) -> str | None:
        return self.metadata.get_single(c.KEY)

    @property
    def capo(self) -> str | None:
        return self.metadata.get_single(c.CAPO)

    def set_metadata(self, name: str, value) -> None:
        self.metadata.add(name, value)

    def _pin_metadata(self, name: str, value) -> None:
        self.metadata.set(name, value)
        self._seed_metadata.set(name, value)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    @property
    def previous_line(self) -> Line | None:
        """The line before the last one, or None."""
        if len(self.lines) >= 2:
            return self.lines[-2]
        return None

    def require_current_line(self) -> Line:
        if self.current_line is None:
            raise SongStateError("Song has no current line; call add_line() or ensure_line() first")
        return self.current_line

    def add_line(self, line: Line | None = None) -> Line:
        """Append *line* (or a new Line) and make it the target of later items.

        The line is stamped with the section type and key context in effect
        right now; later key or section changes do not affect it.
        """
        if line is None:
            line = Line()
        self.lines.append(line)
        line.type = self.section_type
        line.transpose_key = self.transpose_key or self.current_key
        line.key = self.current_key or self.metadata.get_single(c.KEY)
        self.current_line = line
        return line

    def ensure_line(self) -> Line:
        if self.current_line is None:
            return self.add_line()
        return self.current_line

    def add_tag(self, tag_source: "str | Tag") -> Tag:
        tag = Tag.parse(tag_source)
        name = tag.name

        if tag.is_meta_tag():
            self.set_metadata(name, tag.value)
        elif name == c.TRANSPOSE:
            self.transpose_key = tag.value or None
        elif name == c.NEW_KEY:
            self.current_key = tag.value or None
        elif name in _SECTION_STARTS:
            self.ensure_line()
            self._start_section(_SECTION_STARTS[name], tag)
        elif name in _SECTION_ENDS:
            self._end_section(_SECTION_ENDS[name], tag)

        self.ensure_line().add_item(tag)
        return tag

    def add_item(self, item: Item) -> Item:
        if isinstance(item, Tag):
            return self.add_tag(item)
        return self.ensure_line().add_item(item)

    def add_warning(self, message: str, line: int | None = None, column: int | None = None) -> ParserWarning:
        warning = ParserWarning(message, line, column)
        self.warnings.append(warning)
        logger.debug("Structural warning: %s", warning)
        return warning

    def _start_section(self, section_type: str, tag: Tag) -> None:
        self._check_section(c.NONE, tag)
        self.section_type = section_type
        self.require_current_line().type = section_type

    def _end_section(self, section_type: str, tag: Tag) -> None:
        self._check_section(section_type, tag)
        self.section_type = c.NONE

    def _check_section(self, expected: str, tag: Tag) -> None:
        if self.section_type != expected:
            self.add_warning(
                f"Unexpected tag {{{tag.original_name}}}, current section is: {self.section_type}",
                tag.line,
                tag.column,
            )

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    @property
    def paragraphs(self) -> list[Paragraph]:
        """Lines grouped by the empty lines between them.

        Empty lines only separate paragraphs; lines without renderable items
        (metadata, bare section delimiters) are left out of the groups.
        """
        current = Paragraph()
        paragraphs = [current]

        for line in self.lines:
            if line.is_empty():
                current = Paragraph()
                paragraphs.append(current)
            elif line.has_renderable_items():
                current.add_line(line)

        return paragraphs

    @cached_property
    def body_lines(self) -> list[Line]:
        """Lines with the leading non-renderable ones (header metadata) skipped."""
        return _drop_leading_unrenderable(self.lines)

    @cached_property
    def body_paragraphs(self) -> list[Paragraph]:
        return _drop_leading_unrenderable(self.paragraphs)

    # ------------------------------------------------------------------
    # Transformations: every one of these returns a new Song
    # ------------------------------------------------------------------

    def clone(self) -> "Song":
        """Return a deep copy of the song."""
        return self.map_items(lambda item: item)

    def map_items(self, func: Callable[[Item], Item | None]) -> "Song":
        """Return a new Song with every item replaced by ``func(item)``.

        Returning ``None`` drops the item; its line is kept, possibly empty.
        Example, transpose all chords two semitones::

            song.map_items(
                lambda item: item.transpose(2, "D") if isinstance(item, ChordLyricsPair) else item
            )
        """
        song = self._empty_copy()

        for line in self.lines:
            song.add_line()
            for item in line.items:
                changed = func(item)
                if changed is not None:
                    song.add_item(changed)

        return song

    def map_lines(self, func: Callable[[Line], Line | None]) -> "Song":
        """Return a new Song with every line replaced by ``func(line)``.

        Returning ``None`` drops the line and all of its items.
        """
        song = self._empty_copy()

        for line in self.lines:
            changed = func(line)
            if changed is not None:
                song.add_line()
                for item in changed.items:
                    song.add_item(item)

        return song

    def set_capo(self, capo: int | str | None, after: str | None = None) -> "Song":
        """Return a copy with the capo changed.

        ``None`` removes every ``capo`` directive and the capo metadata.
        Otherwise the first ``capo`` directive gets the new value; when there
        is none, a ``{capo: N}`` line is inserted before the first content
        line, or right after the line holding the *after* directive.
        """
        if capo is None:
            updated = self._remove_item(_is_capo_tag)
        else:
            updated = self._update_item(
                _is_capo_tag,
                lambda tag: tag.with_value(capo),
                lambda song: song._insert_directive(c.CAPO, capo, after=after),
            )

        updated._pin_metadata(c.CAPO, capo)
        return updated

    def set_key(self, key: str, theory: MusicTheory | None = None) -> "Song":
        """Return a copy in *key*: key directives rewritten and all chords transposed.

        The shift is measured from the ``key`` metadata, falling back to the
        ``{new_key}`` context when the song declares no key.  ``{new_key}``
        directives are moved by the same shift.
        """
        theory = theory or default_theory
        start = self.key or self.current_key
        offset = theory.distance(start, key)
        logger.debug("Changing key %s -> %s (%+d semitones)", start, key, offset)

        def change(item: Item) -> Item:
            if isinstance(item, Tag) and item.name == c.KEY:
                return item.with_value(key)
            if isinstance(item, Tag) and item.name == c.NEW_KEY and item.has_value():
                # Modulations move with the song
                return item.with_value(theory.transpose(ChordLyricsPair(item.value), offset, key).chords)
            if isinstance(item, ChordLyricsPair):
                return item.transpose(offset, key, theory)
            return item

        updated = self.map_items(change)
        updated._pin_metadata(c.KEY, key)
        return updated

    def _empty_copy(self) -> "Song":
        return Song(self._seed_metadata)

    def _insert_directive(self, name: str, value, after: str | None = None) -> "Song":
        index = None
        if after is not None:
            index = next(
                (i + 1 for i, line in enumerate(self.lines)
                 if any(isinstance(item, Tag) and item.name == after for item in line.items)),
                None,
            )
        if index is None:
            index = next(
                (i for i, line in enumerate(self.lines)
                 if any(not isinstance(item, Tag) for item in line.items)),
                len(self.lines),
            )

        line = Line()
        line.add_tag(name, value)

        song = self.clone()
        song.lines = [*song.lines[:index], line, *song.lines[index:]]
        return song

    def _update_item(
        self,
        find: Callable[[Item], bool],
        update: Callable[[Item], Item | None],
        not_found: Callable[["Song"], "Song"],
    ) -> "Song":
        found = False

        def change(item: Item) -> Item | None:
            nonlocal found
            if not found and find(item):
                found = True
                return update(item)
            return item

        updated = self.map_items(change)
        if not found:
            return not_found(updated)
        return updated

    def _remove_item(self, predicate: Callable[[Item], bool]) -> "Song":
        def change(line: Line) -> Line | None:
            index = next((i for i, item in enumerate(line.items) if predicate(item)), None)
            if index is None:
                return line
            if len(line.items) == 1:
                return None
            return line.with_items([*line.items[:index], *line.items[index + 1:]])

        return self.map_lines(change)

    def __repr__(self) -> str:
        return f"<Song {self.title!r}: {len(self.lines)} lines, {len(self.warnings)} warnings>"


def _is_capo_tag(item: Item) -> bool:
    return isinstance(item, Tag) and item.name == c.CAPO


def _drop_leading_unrenderable(collection: list) -> list:
    result = list(collection)
    while result and not result[0].has_renderable_items():
        result.pop(0)
    return result

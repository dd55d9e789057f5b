"""Builds a :class:`~chordsheet.song.Song` from classified lines.

:class:`ParseCursor` holds everything that only exists while a sheet is being
read (the song under construction, the open section, a chord line waiting
for its lyrics) and turns each classifier :class:`Fragment` into calls on the
Song's building API.  :class:`ChordSheetParser` drives it over a whole text.

Usage::

    from chordsheet.parser.cursor import ChordSheetParser
    from chordsheet.parser.ultimate_guitar import UltimateGuitarClassifier

    song = ChordSheetParser(UltimateGuitarClassifier()).parse(text)
    for warning in song.warnings:
        print(warning)
"""

import logging
from dataclasses import replace

from .. import constants as c
from ..models import ChordLyricsPair, ParserWarning
from ..song import Song
from ..tag import Tag
from .base import Fragment, FragmentKind, LineClassifier, SectionState
from .plain import PlainClassifier
from .utils import chord_only_pairs, pair_chords_with_lyrics, split_lines

logger = logging.getLogger(__name__)

_SECTION_STARTS = {tag: section for section, tag in c.START_SECTION_TAGS.items()}


class ParseCursor:
    """A song under construction plus the state needed to extend it."""

    def __init__(
        self,
        classifier: LineClassifier,
        song: Song | None = None,
        preserve_whitespace: bool = True,
    ):
        self.classifier = classifier
        self.song = song if song is not None else Song()
        self.preserve_whitespace = preserve_whitespace
        self.section_type = c.NONE
        self.line_number = 0
        self._pending_chords: str | None = None

    def state(self) -> SectionState:
        line = self.song.current_line
        previous = self.song.previous_line
        return SectionState(
            section_type=self.section_type,
            line_is_empty=line is not None and line.is_empty() and self._pending_chords is None,
            previous_line_is_empty=previous is None or previous.is_empty(),
        )

    def step(self, raw_line: str) -> list[ParserWarning]:
        """Classify and apply one raw line; return the warnings it caused."""
        self.line_number += 1
        known = len(self.song.warnings)
        for fragment in self.classifier.classify(raw_line, self.state()):
            self.apply(fragment)
        return self.song.warnings[known:]

    def finish(self) -> Song:
        """Flush a dangling chord line and force-close the open section."""
        self._flush_pending_chords()
        if self.section_type in c.END_SECTION_TAGS:
            self.start_line()
        self.close_section(new_line=False)
        return self.song

    # ------------------------------------------------------------------
    # Fragment handling
    # ------------------------------------------------------------------

    def apply(self, fragment: Fragment) -> None:
        kind = fragment.kind

        if kind is FragmentKind.LYRICS and self._pending_chords is not None:
            chords, self._pending_chords = self._pending_chords, None
            for pair in pair_chords_with_lyrics(chords, fragment.text, self.preserve_whitespace):
                self.song.add_item(pair)
            return

        self._flush_pending_chords()

        if kind is FragmentKind.BLANK:
            self.start_line()
        elif kind is FragmentKind.CHORDS:
            self.start_line()
            self._pending_chords = fragment.text
        elif kind is FragmentKind.LYRICS:
            self.start_line()
            self.song.add_item(ChordLyricsPair("", fragment.text))
        elif kind is FragmentKind.DIRECTIVE:
            self.start_line()
            self._add_directive(Tag.parse(fragment.text))
        elif kind is FragmentKind.START_SECTION:
            self.start_line()
            self.open_section(fragment.section, fragment.text)
        elif kind is FragmentKind.END_SECTION:
            self.close_section()
        elif kind is FragmentKind.COMMENT:
            self.start_line()
            self.close_section()
            self.song.add_tag(self._tag(c.COMMENT, fragment.text))
        elif kind is FragmentKind.TAB:
            self.start_line()
            if self.section_type != c.TAB:
                self.start_line()
                self.open_section(c.TAB)
            self.song.add_item(ChordLyricsPair("", fragment.text))
        elif kind is FragmentKind.REPEAT:
            self.start_line()
            self.song.add_item(ChordLyricsPair(fragment.text, fragment.lyrics))

    def start_line(self) -> None:
        self.song.add_line()

    def open_section(self, section_type: str, label: str = "", tag: Tag | None = None) -> None:
        if self.section_type != c.NONE:
            self.close_section()

        self.section_type = section_type
        start = c.START_SECTION_TAGS.get(section_type)
        if start:
            self.song.add_tag(tag or self._tag(start, label))

    def close_section(self, new_line: bool = True) -> None:
        end = c.END_SECTION_TAGS.get(self.section_type)
        if end:
            self.song.add_tag(self._tag(end))
            if new_line:
                self.start_line()
        self.section_type = c.NONE

    def _add_directive(self, tag: Tag) -> None:
        tag = replace(tag, line=self.line_number, column=1)
        if tag.name in _SECTION_STARTS:
            self.open_section(_SECTION_STARTS[tag.name], tag=tag)
            return
        if tag.is_section_end():
            # The song reports a mismatch with the open section.
            self.song.add_tag(tag)
            self.section_type = c.NONE
            return
        self.song.add_tag(tag)

    def _flush_pending_chords(self) -> None:
        if self._pending_chords is None:
            return
        chords, self._pending_chords = self._pending_chords, None
        for pair in chord_only_pairs(chords, self.preserve_whitespace):
            self.song.add_item(pair)

    def _tag(self, name: str, value: str = "") -> Tag:
        return Tag(name, value, line=self.line_number, column=1)


class ChordSheetParser:
    """Parse chord sheet text into a :class:`~chordsheet.song.Song`.

    Args:
        classifier:          dialect to read the sheet with; defaults to
                             :class:`~chordsheet.parser.plain.PlainClassifier`.
        preserve_whitespace: keep the padding after each chord in
                             ``ChordLyricsPair.chords``.
    """

    def __init__(self, classifier: LineClassifier | None = None, preserve_whitespace: bool = True):
        self.classifier = classifier or PlainClassifier()
        self.preserve_whitespace = preserve_whitespace

    def parse(self, text: str, song: Song | None = None) -> Song:
        cursor = ParseCursor(self.classifier, song=song, preserve_whitespace=self.preserve_whitespace)

        for raw_line in split_lines(text):
            for warning in cursor.step(raw_line):
                logger.info("%s", warning)

        known = len(cursor.song.warnings)
        song = cursor.finish()
        for warning in song.warnings[known:]:
            logger.info("%s", warning)
        logger.debug(
            "Parsed %d text lines into %d song lines (%d warnings)",
            cursor.line_number,
            len(song.lines),
            len(song.warnings),
        )
        return song

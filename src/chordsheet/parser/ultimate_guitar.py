"""Ultimate Guitar chord sheet dialect.

Sheets look like::

    [Verse 1]
    Am        C             G
    Today is gonna be the day

    [Chorus]
    Am C G 2x

    [Solo]
    e|-----0---1---3---|
    B|--1--------------|

Rules, first match wins:

  1. A blank line after a non-empty line closes the open section.
  2. ``[Verse...]``          → start a VERSE section labelled with the text.
  3. ``[Chorus]``            → start a CHORUS section.
  4. any other ``[Label]``   → close the open section, add ``{comment: Label}``.
  5. more than 5 dashes in a line longer than 8 characters → TAB section line.
  6. chord line with a repetition marker (``2x``, ``x2:``) → chords plus the
     marker as aligned lyric text.
  7. anything else is left to the fallback classifier.

Rule 5 is checked before rules 6 and 7, so a line that is both dash-heavy and
made of chord symbols is always tablature.
"""

import re

from ..constants import CHORUS, NONE, VERSE
from .base import Fragment, FragmentKind, LineClassifier, SectionState
from .plain import PlainClassifier
from .utils import extract_repetition, is_tab_line

VERSE_LINE_RE = re.compile(r"^\[(Verse.*)\]", re.IGNORECASE)
CHORUS_LINE_RE = re.compile(r"^\[(Chorus)\]", re.IGNORECASE)
OTHER_METADATA_LINE_RE = re.compile(r"^\[([^\]]+)\]")


class UltimateGuitarClassifier(LineClassifier):
    """Section state machine for Ultimate Guitar sheets."""

    names = ("ultimate-guitar", "ultimate_guitar", "ug")

    def __init__(self, fallback: LineClassifier | None = None):
        self.fallback = fallback or PlainClassifier()

    def classify(self, raw_line: str, state: SectionState) -> tuple[Fragment, ...]:
        fragments: list[Fragment] = []
        if self.is_section_end(state):
            fragments.append(Fragment(FragmentKind.END_SECTION))
        fragments.extend(self._classify_line(raw_line, state))
        return tuple(fragments)

    @staticmethod
    def is_section_end(state: SectionState) -> bool:
        return (
            state.section_type != NONE
            and state.line_is_empty
            and not state.previous_line_is_empty
        )

    def _classify_line(self, raw_line: str, state: SectionState) -> tuple[Fragment, ...]:
        m = VERSE_LINE_RE.match(raw_line)
        if m:
            return (Fragment(FragmentKind.START_SECTION, m.group(1), section=VERSE),)

        m = CHORUS_LINE_RE.match(raw_line)
        if m:
            return (Fragment(FragmentKind.START_SECTION, m.group(1), section=CHORUS),)

        m = OTHER_METADATA_LINE_RE.match(raw_line)
        if m:
            return (Fragment(FragmentKind.COMMENT, m.group(1)),)

        if is_tab_line(raw_line):
            return (Fragment(FragmentKind.TAB, raw_line),)

        repetition = extract_repetition(raw_line)
        if repetition:
            chords, lyrics = repetition
            return (Fragment(FragmentKind.REPEAT, chords, lyrics=lyrics),)

        return self.fallback.classify(raw_line, state)

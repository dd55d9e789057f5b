"""Generic "chords over lyrics" grammar.

    {title: Hallelujah}
    C        Am
    I heard there was a secret chord

A chord line is paired with the lyric line right under it by the parse
cursor; a chord line with no lyric line under it stays chord-only.
"""

from .base import Fragment, FragmentKind, LineClassifier, SectionState
from .utils import is_chord_line, is_directive_line


class PlainClassifier(LineClassifier):
    """Classifies blank, directive, chord and lyric lines."""

    names = ("plain", "chords-over-lyrics")

    def classify(self, raw_line: str, state: SectionState) -> tuple[Fragment, ...]:
        if not raw_line.strip():
            return (Fragment(FragmentKind.BLANK),)
        if is_directive_line(raw_line):
            return (Fragment(FragmentKind.DIRECTIVE, raw_line.strip()),)
        if is_chord_line(raw_line):
            return (Fragment(FragmentKind.CHORDS, raw_line),)
        return (Fragment(FragmentKind.LYRICS, raw_line),)

"""Regexes and helpers shared by the line classifiers and the parse cursor.

  1. is_chord_line()               : every token is a chord symbol
  2. is_tab_line()                 : dash-density tablature heuristic
  3. extract_repetition()          : split "Am C G 2x" into chords and marker
  4. extract_chords_with_offsets() : (column, name) pairs from a chord line
  5. pair_chords_with_lyrics()     : chord line + lyric line → ChordLyricsPairs
"""

import re

from ..models import ChordLyricsPair

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Chord root: a letter or a solfège name, with an optional accidental.
_ROOT_PAT = r"(?:Sol|Do|Re|Mi|Fa|La|Si|[A-G])[#b]?"

# Chord symbol.  Handles:
#   Standard:     A, Am, Am7, Amaj7, Asus4, C#m7, E7(#9), Bm7b5
#   Slash chords: G/B, D/F#
#   Solfège:      Do, Rem, Sol7, La/Do
CHORD_PAT = (
    rf"{_ROOT_PAT}"
    r"(?:maj|min|dim|aug|sus|add|m|M|\d|[+\-#b()°ø^*])*"
    rf"(?:/{_ROOT_PAT})?"
)
CHORD_NAME_RE = re.compile(rf"^{CHORD_PAT}$")

# One or more chord symbols separated by whitespace.
CHORD_LINE_RE = re.compile(rf"^\s*(?:{CHORD_PAT}(?:\s+|$))+$")

# Repetition markers: 2x, x2, 4x:, x3::
REPETITION_RE = re.compile(r"([0-9]+x:*)|(x[0-9]+:*)")

# A whole line holding one ChordPro-style directive: {title: Wonderwall}
DIRECTIVE_LINE_RE = re.compile(r"^\s*\{[^{}]+\}\s*$")

TAB_MIN_LENGTH = 8
TAB_MIN_DASHES = 5


# ---------------------------------------------------------------------------
# Line predicates
# ---------------------------------------------------------------------------


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(text: str) -> list[str]:
    return normalize_line_endings(text).split("\n")


def is_chord_line(line: str) -> bool:
    return bool(line.strip()) and bool(CHORD_LINE_RE.match(line))


def is_tab_line(line: str) -> bool:
    """A line longer than 8 characters with more than 5 dashes."""
    return len(line) > TAB_MIN_LENGTH and line.count("-") > TAB_MIN_DASHES


def is_directive_line(line: str) -> bool:
    return bool(DIRECTIVE_LINE_RE.match(line))


# ---------------------------------------------------------------------------
# Repetition markers
# ---------------------------------------------------------------------------


def extract_repetition(line: str) -> tuple[str, str] | None:
    """Split a chord line carrying a repetition marker into chords and lyrics.

    Returns ``(chords, lyrics)`` where *chords* is *line* with the first marker
    blanked out and *lyrics* is the marker (colons removed) padded with spaces
    so it sits under the column the marker occupied::

        >>> extract_repetition("Am C G 2x")
        ('Am C G   ', '       2x')

    Returns None when *line* has no marker or is not a chord line once the
    markers are removed.
    """
    m = REPETITION_RE.search(line)
    if not m:
        return None
    if not is_chord_line(REPETITION_RE.sub("", line)):
        return None

    marker = m.group()
    chords = line[: m.start()] + " " * len(marker) + line[m.end():]
    lyrics = " " * m.start() + marker.replace(":", "")
    return chords, lyrics


# ---------------------------------------------------------------------------
# Chord / lyric pairing
# ---------------------------------------------------------------------------


def extract_chords_with_offsets(line: str) -> list[tuple[int, str]]:
    """Return ``(column_offset, chord_name)`` pairs from a chord line, left to right."""
    return [(m.start(), m.group()) for m in re.finditer(r"\S+", line) if CHORD_NAME_RE.match(m.group())]


def pair_chords_with_lyrics(
    chord_line: str, lyric_line: str, preserve_whitespace: bool = True
) -> list[ChordLyricsPair]:
    """Cut *lyric_line* at the columns the chords of *chord_line* start at.

    Each chord gets the lyrics from its own column up to the next chord's
    column; the last chord gets the rest of the line.  Lyrics left of the
    first chord become a chord-less pair, so joining every pair's lyrics
    gives back *lyric_line*::

        chord_line = "Am   C   G"
        lyric_line = "Hello world"
        result     = [("Am   ", "Hello"), ("C   ", " wor"), ("G", "ld")]

    With *preserve_whitespace* off, chords carry no padding ("Am", "C", "G").
    """
    chords = extract_chords_with_offsets(chord_line)
    if not chords:
        return [ChordLyricsPair("", lyric_line)]

    pairs: list[ChordLyricsPair] = []
    first_offset = chords[0][0]
    if lyric_line[:first_offset]:
        pairs.append(ChordLyricsPair("", lyric_line[:first_offset]))

    for i, (offset, name) in enumerate(chords):
        end = chords[i + 1][0] if i + 1 < len(chords) else None
        chord_text = chord_line[offset:end] if preserve_whitespace else name
        pairs.append(ChordLyricsPair(chord_text, lyric_line[offset:end]))

    return pairs


def chord_only_pairs(chord_line: str, preserve_whitespace: bool = True) -> list[ChordLyricsPair]:
    """Pairs for a chord line with no lyric line under it (instrumental passage)."""
    return pair_chords_with_lyrics(chord_line, "", preserve_whitespace)

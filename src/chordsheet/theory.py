"""Key distance and chord transposition.

The document model only relies on the :class:`MusicTheory` protocol, so a
richer implementation can be passed to :meth:`Song.set_key` without touching
the model.  :class:`SemitoneTheory` is the default: it moves chord roots and
bass notes by semitones and leaves chord qualities alone.
"""

import re
from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import ChordLyricsPair

# Pitch-class map: note name -> semitone offset from C
PITCH_CLASS = {
    "C": 0, "C#": 1, "Db": 1,
    "D": 2, "D#": 3, "Eb": 3,
    "E": 4, "Fb": 4, "E#": 5,
    "F": 5, "F#": 6, "Gb": 6,
    "G": 7, "G#": 8, "Ab": 8,
    "A": 9, "A#": 10, "Bb": 10,
    "B": 11, "Cb": 11, "B#": 0,
}

SOLFEGE = {"Do": "C", "Re": "D", "Mi": "E", "Fa": "F", "Sol": "G", "La": "A", "Si": "B"}
_LETTER_TO_SOLFEGE = {letter: name for name, letter in SOLFEGE.items()}

SHARP_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
FLAT_NAMES = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Keys spelled with flats (major and relative minor)
FLAT_KEYS = frozenset({
    "F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb",
    "Dm", "Gm", "Cm", "Fm", "Bbm", "Ebm", "Abm",
})

_NOTE_PAT = r"(?:Sol|Do|Re|Mi|Fa|La|Si|[A-G])[#b]?"
_KEY_RE = re.compile(rf"^\s*({_NOTE_PAT})(m(?!aj))?")
# A chord root at the start of a token, or a bass note after "/"
_CHORD_NOTE_RE = re.compile(rf"(?:^|(?<=[\s/(]))({_NOTE_PAT})")


class MusicTheory(Protocol):
    def distance(self, from_key: str | None, to_key: str) -> int:
        """Semitones to move from *from_key* up to *to_key*."""

    def transpose(
        self, pair: "ChordLyricsPair", offset: int, target_key: str | None
    ) -> "ChordLyricsPair":
        """Return *pair* with its chords moved by *offset* semitones."""


def note_value(note: str) -> int | None:
    """Return the pitch class (0-11) of *note*, or None if it is not a note."""
    letter, accidental = _split_note(note)
    base = PITCH_CLASS.get(letter)
    if base is None:
        return None
    if accidental == "#":
        return (base + 1) % 12
    if accidental == "b":
        return (base - 1) % 12
    return base


def _split_note(note: str) -> tuple[str, str]:
    accidental = note[-1] if note[-1:] in ("#", "b") and len(note) > 1 else ""
    root = note[: len(note) - len(accidental)]
    return SOLFEGE.get(root, root), accidental


def key_value(key: str | None) -> int | None:
    if not key:
        return None
    m = _KEY_RE.match(key)
    if not m:
        return None
    return note_value(m.group(1))


def uses_flats(key: str | None) -> bool:
    if not key:
        return False
    m = _KEY_RE.match(key)
    if not m:
        return False
    root = m.group(1)
    if root.endswith("b"):
        return True
    letter, accidental = _split_note(root)
    return f"{letter}{accidental}{m.group(2) or ''}" in FLAT_KEYS


class SemitoneTheory:
    """Equal-temperament transposition over chord roots and bass notes."""

    def distance(self, from_key: str | None, to_key: str) -> int:
        start = key_value(from_key)
        end = key_value(to_key)
        if start is None or end is None:
            return 0
        return (end - start) % 12

    def transpose(
        self, pair: "ChordLyricsPair", offset: int, target_key: str | None
    ) -> "ChordLyricsPair":
        if offset % 12 == 0:
            return pair
        names = FLAT_NAMES if uses_flats(target_key) else SHARP_NAMES

        def shift(m: re.Match) -> str:
            note = m.group(1)
            value = note_value(note)
            if value is None:
                return note
            name = names[(value + offset) % 12]
            if note[:2] in SOLFEGE or note[:3] in SOLFEGE:
                name = _LETTER_TO_SOLFEGE[name[0]] + name[1:]
            return name

        return replace(pair, chords=_CHORD_NOTE_RE.sub(shift, pair.chords))


default_theory = SemitoneTheory()

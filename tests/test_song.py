import pytest

from chordsheet import constants as c
from chordsheet.exceptions import SongStateError
from chordsheet.models import ChordLyricsPair, Line
from chordsheet.parser.cursor import ChordSheetParser
from chordsheet.parser.ultimate_guitar import UltimateGuitarClassifier
from chordsheet.song import Song
from chordsheet.tag import Tag

SHEET = """\
{title: Let It Be}
{artist: The Beatles}
{key: C}

[Verse 1]
C         G
When I find myself
Am          F
Mother Mary comes to me

[Chorus]
C G Am F 2x
"""


def _parse(text: str = SHEET) -> Song:
    return ChordSheetParser(UltimateGuitarClassifier()).parse(text)


def _song(*lines: list) -> Song:
    """Build a song through the public API, one list of items per line."""
    song = Song()
    for items in lines:
        song.add_line()
        for item in items:
            song.add_item(item)
    return song


def _item_count(song: Song) -> int:
    return sum(len(line.items) for line in song.lines)


def _chords(song: Song) -> list[str]:
    return [
        item.chords.strip()
        for line in song.lines
        for item in line.items
        if isinstance(item, ChordLyricsPair) and item.has_chords()
    ]


# ---------------------------------------------------------------------------
# Building
# ---------------------------------------------------------------------------


def test_add_line_becomes_current_line():
    song = Song()
    line = song.add_line()
    assert song.current_line is line
    assert song.lines == [line]


def test_add_line_adopts_given_line():
    song = Song()
    line = Line()
    assert song.add_line(line) is line
    assert song.lines[0] is line


def test_ensure_line_is_idempotent():
    song = Song()
    line = song.ensure_line()
    assert song.ensure_line() is line
    assert len(song.lines) == 1


def test_require_current_line_without_line_raises():
    with pytest.raises(SongStateError):
        Song().require_current_line()


def test_add_item_creates_line_when_needed():
    song = Song()
    song.add_item(ChordLyricsPair("C", "Hello"))
    assert len(song.lines) == 1
    assert song.lines[0].items == [ChordLyricsPair("C", "Hello")]


def test_meta_tag_is_recorded_and_kept_on_line():
    song = Song()
    tag = song.add_tag("{title: Help!}")
    assert song.title == "Help!"
    assert song.lines[0].items == [tag]


def test_repeated_meta_tag_collects_values():
    song = Song()
    song.add_tag("{artist: Lennon}")
    song.add_tag("{artist: McCartney}")
    assert song.metadata.get("artist") == ["Lennon", "McCartney"]
    assert song.artist == "Lennon"


def test_key_context_is_stamped_on_new_lines():
    song = Song()
    first = song.add_line()
    song.add_tag("{key: C}")
    second = song.add_line()
    song.add_tag("{new_key: E}")
    third = song.add_line()
    assert first.key is None
    assert second.key == "C"
    assert third.key == "E"
    assert song.current_key == "E"


def test_transpose_directive_only_affects_later_lines():
    song = Song()
    before = song.add_line()
    song.add_tag("{transpose: D}")
    after = song.add_line()
    assert before.transpose_key is None
    assert after.transpose_key == "D"


def test_section_tags_set_line_types():
    song = Song()
    song.add_line()
    song.add_tag("{start_of_chorus}")
    inside = song.add_line()
    song.add_tag("{end_of_chorus}")
    outside = song.add_line()
    assert song.lines[0].type == c.CHORUS
    assert inside.type == c.CHORUS
    assert outside.type == c.NONE
    assert song.warnings == []


def test_unexpected_end_tag_records_warning():
    song = Song()
    song.add_tag(Tag("end_of_chorus", line=7, column=1))
    assert len(song.warnings) == 1
    warning = song.warnings[0]
    assert "end_of_chorus" in warning.message
    assert "current section is: none" in warning.message
    assert warning.line == 7
    assert song.section_type == c.NONE


def test_nested_start_tag_records_warning():
    song = Song()
    song.add_tag("{start_of_verse}")
    song.add_tag("{start_of_chorus}")
    assert len(song.warnings) == 1
    assert song.section_type == c.CHORUS


def test_previous_line():
    song = Song()
    assert song.previous_line is None
    first = song.add_line()
    song.add_line()
    assert song.previous_line is first


# ---------------------------------------------------------------------------
# Paragraphs / body
# ---------------------------------------------------------------------------


def test_paragraphs_split_on_empty_lines():
    song = ChordSheetParser().parse("A: x\n\nB: y\nC: z")
    paragraphs = song.paragraphs
    assert len(paragraphs) == 2
    assert paragraphs[0].lines == [song.lines[0]]
    assert paragraphs[1].lines == song.lines[2:4]
    assert paragraphs[1].lines[0] is song.lines[2]


def test_paragraphs_skip_lines_without_renderable_items():
    song = _song([Tag("start_of_verse")], [ChordLyricsPair("C", "la")], [Tag("end_of_verse")])
    assert len(song.paragraphs) == 1
    assert song.paragraphs[0].lines == [song.lines[1]]


def test_body_lines_skip_header_lines():
    song = _parse()
    assert song.body_lines[0].items == [Tag("start_of_verse", "Verse 1")]
    assert all(line.has_renderable_items() for line in song.body_lines[:1])
    assert song.lines[0] not in song.body_lines


def test_body_lines_are_cached():
    song = _parse()
    assert song.body_lines is song.body_lines


def test_body_paragraphs_skip_header_paragraph():
    song = ChordSheetParser().parse("{title: Help!}\n\nHelp me if you can")
    assert len(song.paragraphs) == 2
    assert len(song.body_paragraphs) == 1
    assert song.body_paragraphs[0].lines == [song.lines[2]]


# ---------------------------------------------------------------------------
# clone / map_items / map_lines
# ---------------------------------------------------------------------------


def test_clone_is_structurally_equal_but_independent():
    song = _parse()
    copy = song.clone()
    assert copy is not song
    assert copy.lines == song.lines
    assert copy.metadata == song.metadata
    assert all(a is not b for a, b in zip(copy.lines, song.lines))

    copy.lines[0].items.clear()
    copy.metadata.set("title", "Yesterday")
    assert song.lines[0].items != []
    assert song.title == "Let It Be"


def test_clone_keeps_constructor_metadata():
    song = Song({"title": "Help!"})
    song.add_item(ChordLyricsPair("A", "Help"))
    assert song.clone().title == "Help!"


def test_clone_replays_warnings():
    song = ChordSheetParser().parse("{end_of_chorus}\nla la")
    assert len(song.clone().warnings) == len(song.warnings) == 1


def test_map_items_identity_equals_clone():
    song = _parse()
    assert song.map_items(lambda item: item).lines == song.clone().lines


def test_map_items_replaces_items():
    song = _song([ChordLyricsPair("C", "hello")])
    shouted = song.map_items(lambda item: ChordLyricsPair(item.chords, item.lyrics.upper()))
    assert shouted.lines[0].items == [ChordLyricsPair("C", "HELLO")]
    assert song.lines[0].items == [ChordLyricsPair("C", "hello")]


def test_map_items_deleting_every_item_keeps_empty_line():
    song = _song([Tag("comment", "Intro")], [ChordLyricsPair("C", "a"), ChordLyricsPair("G", "b")])
    result = song.map_items(lambda item: None if isinstance(item, ChordLyricsPair) else item)
    assert len(result.lines) == 2
    assert result.lines[1].items == []


def test_map_lines_drops_lines():
    song = _song([Tag("title", "Help!")], [ChordLyricsPair("A", "Help")])
    result = song.map_lines(lambda line: None if all(isinstance(i, Tag) for i in line.items) else line)
    assert len(result.lines) == 1
    assert result.lines[0].items == [ChordLyricsPair("A", "Help")]


def test_map_lines_uses_replacement_items():
    song = _song([ChordLyricsPair("A", "one")], [ChordLyricsPair("B", "two")])
    result = song.map_lines(lambda line: Line(items=[ChordLyricsPair("", "x")]))
    assert [line.items for line in result.lines] == [[ChordLyricsPair("", "x")]] * 2


# ---------------------------------------------------------------------------
# set_capo
# ---------------------------------------------------------------------------


def test_set_capo_inserts_directive_before_first_content_line():
    song = _song([Tag("title", "Help!")], [Tag("artist", "The Beatles")], [ChordLyricsPair("A", "Help")])
    result = song.set_capo(3)
    assert result.lines[2].items == [Tag("capo", "3")]
    assert result.capo == "3"
    assert len(result.lines) == len(song.lines) + 1
    assert "capo" not in song.metadata


def test_set_capo_inserts_after_anchor_directive():
    song = _song([Tag("title", "Help!")], [Tag("artist", "The Beatles")], [ChordLyricsPair("A", "Help")])
    result = song.set_capo(1, after=c.TITLE)
    assert result.lines[1].items == [Tag("capo", "1")]


def test_set_capo_without_anchor_inserts_before_first_content_line():
    song = _parse("{title: X}\nC   G\nla la\n")
    result = song.set_capo(2, after=c.ARTIST)
    assert result.lines[1].items == [Tag("capo", "2")]
    assert result.lines[2].items == song.lines[1].items


def test_set_capo_updates_existing_directive():
    song = _song([Tag("capo", "2")], [ChordLyricsPair("A", "Help")])
    result = song.set_capo(5)
    assert result.lines[0].items == [Tag("capo", "5")]
    assert result.metadata.get("capo") == "5"
    assert _item_count(result) == _item_count(song)
    assert song.lines[0].items == [Tag("capo", "2")]


def test_set_capo_none_removes_directives_and_metadata():
    song = _song([Tag("capo", "2"), Tag("title", "Help!")], [Tag("capo", "2")], [ChordLyricsPair("A", "Help")])
    result = song.set_capo(None)
    assert "capo" not in result.metadata
    assert result.lines[0].items == [Tag("title", "Help!")]
    assert len(result.lines) == 2
    assert song.capo == "2"


def test_set_capo_round_trip():
    song = _parse()
    with_capo = song.set_capo(3)
    back = with_capo.set_capo(None)
    assert _item_count(with_capo) == _item_count(song) + 1
    assert _item_count(back) == _item_count(song)
    assert "capo" not in back.metadata
    assert back.lines == song.lines


# ---------------------------------------------------------------------------
# set_key
# ---------------------------------------------------------------------------


def test_set_key_transposes_chords_and_rewrites_key():
    song = _parse()
    result = song.set_key("D")
    assert _chords(song)[:4] == ["C", "G", "Am", "F"]
    assert _chords(result)[:4] == ["D", "A", "Bm", "G"]
    assert result.key == "D"
    assert Tag("key", "D") in result.lines[2].items
    assert song.key == "C"


def test_set_key_transposes_repeated_chord_line():
    result = _parse().set_key("D")
    assert _chords(result)[-1].split() == ["D", "A", "Bm", "G"]


def test_set_key_to_same_key_keeps_chords():
    song = _parse()
    assert _chords(song.set_key("C")) == _chords(song)


def test_set_key_without_known_key_only_sets_metadata():
    song = _song([ChordLyricsPair("C", "la")])
    result = song.set_key("G")
    assert _chords(result) == ["C"]
    assert result.key == "G"


def test_set_key_metadata_survives_clone():
    result = _song([ChordLyricsPair("C", "la")]).set_key("G")
    assert result.clone().key == "G"


def test_set_key_uses_given_theory():
    class FixedTheory:
        def __init__(self):
            self.calls = []

        def distance(self, from_key, to_key):
            return 7

        def transpose(self, pair, offset, target_key):
            self.calls.append((pair.chords, offset, target_key))
            return ChordLyricsPair("X", pair.lyrics)

    theory = FixedTheory()
    song = _song([ChordLyricsPair("C", "la"), ChordLyricsPair("", "no chord")])
    result = song.set_key("G", theory=theory)
    assert theory.calls == [("C", 7, "G")]
    assert result.lines[0].items == [ChordLyricsPair("X", "la"), ChordLyricsPair("", "no chord")]


def test_set_key_twice_equals_once():
    song = _parse("{key: C}\n{new_key: C}\nC   G\nla la\n")
    assert _chords(song.set_key("D").set_key("E")) == _chords(song.set_key("E")) == ["E", "B"]


def test_set_key_moves_new_key_directives():
    song = _parse("{key: C}\nC\nla\n{new_key: G}\nG\nlo\n")
    result = song.set_key("D")
    assert Tag("new_key", "A") in result.lines[2].items
    assert result.current_key == "A"
    assert _chords(result) == ["D", "A"]

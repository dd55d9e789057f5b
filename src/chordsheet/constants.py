# Section types a Line can belong to.
NONE = "none"
VERSE = "verse"
CHORUS = "chorus"
TAB = "tab"

# Paragraph type when its lines belong to different sections.
INDETERMINATE = "indeterminate"

# Directive names (normalized form).
TITLE = "title"
SUBTITLE = "subtitle"
ARTIST = "artist"
COMPOSER = "composer"
LYRICIST = "lyricist"
COPYRIGHT = "copyright"
ALBUM = "album"
YEAR = "year"
KEY = "key"
TIME = "time"
TEMPO = "tempo"
DURATION = "duration"
CAPO = "capo"
COMMENT = "comment"
TRANSPOSE = "transpose"
NEW_KEY = "new_key"

START_OF_VERSE = "start_of_verse"
END_OF_VERSE = "end_of_verse"
START_OF_CHORUS = "start_of_chorus"
END_OF_CHORUS = "end_of_chorus"
START_OF_TAB = "start_of_tab"
END_OF_TAB = "end_of_tab"

START_SECTION_TAGS = {
    VERSE: START_OF_VERSE,
    CHORUS: START_OF_CHORUS,
    TAB: START_OF_TAB,
}

END_SECTION_TAGS = {
    VERSE: END_OF_VERSE,
    CHORUS: END_OF_CHORUS,
    TAB: END_OF_TAB,
}

"""Directive tokens (``{name: value}``) found in a chord sheet.

A :class:`Tag` is immutable.  Changing a tag, e.g. rewriting the value of a
``{capo: 2}`` directive, produces a new instance via :meth:`Tag.with_value`.
"""

import re
from dataclasses import dataclass, field, replace

from . import constants as c

ALIASES = {
    "t": c.TITLE,
    "st": c.SUBTITLE,
    "c": c.COMMENT,
    "soc": c.START_OF_CHORUS,
    "eoc": c.END_OF_CHORUS,
    "sov": c.START_OF_VERSE,
    "eov": c.END_OF_VERSE,
    "sot": c.START_OF_TAB,
    "eot": c.END_OF_TAB,
}

META_TAGS = frozenset({
    c.TITLE,
    c.SUBTITLE,
    c.ARTIST,
    c.COMPOSER,
    c.LYRICIST,
    c.COPYRIGHT,
    c.ALBUM,
    c.YEAR,
    c.KEY,
    c.TIME,
    c.TEMPO,
    c.DURATION,
    c.CAPO,
})

CUSTOM_META_PREFIX = "x_"

# "{name: value}", "name: value", "{name}" or "name"
_TAG_RE = re.compile(r"^\s*\{?\s*([^:}]+?)\s*(?::\s*(.*?))?\s*\}?\s*$", re.DOTALL)


def normalize_name(name: str) -> str:
    name = name.strip().lower()
    return ALIASES.get(name, name)


@dataclass(frozen=True)
class Tag:
    """A directive with a normalized name and an optional value."""

    original_name: str
    value: str = ""
    line: int | None = field(default=None, compare=False)
    column: int | None = field(default=None, compare=False)

    @property
    def name(self) -> str:
        return normalize_name(self.original_name)

    @classmethod
    def parse(cls, source: "str | Tag") -> "Tag":
        """Return *source* when it already is a Tag, otherwise parse it.

        Accepted forms: ``{name: value}``, ``name: value``, ``{name}``, ``name``.
        """
        if isinstance(source, Tag):
            return source
        m = _TAG_RE.match(source)
        if not m:
            return cls(source.strip())
        return cls(m.group(1), m.group(2) or "")

    def with_value(self, value) -> "Tag":
        return replace(self, value="" if value is None else str(value))

    def has_value(self) -> bool:
        return self.value != ""

    def is_meta_tag(self) -> bool:
        name = self.name
        return name in META_TAGS or name.startswith(CUSTOM_META_PREFIX)

    def is_section_start(self) -> bool:
        return self.name in c.START_SECTION_TAGS.values()

    def is_section_end(self) -> bool:
        return self.name in c.END_SECTION_TAGS.values()

    def is_section_delimiter(self) -> bool:
        return self.is_section_start() or self.is_section_end()

    def is_comment(self) -> bool:
        return self.name == c.COMMENT

    def is_renderable(self) -> bool:
        # A labelled section start ("Verse 1") shows its label; bare
        # delimiters and metadata render nothing in the body.
        if self.is_comment():
            return True
        return self.is_section_start() and self.has_value()

    def __str__(self) -> str:
        if self.has_value():
            return f"{{{self.original_name}: {self.value}}}"
        return f"{{{self.original_name}}}"

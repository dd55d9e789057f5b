import logging
import sys

import click

from .config import load_config
from .exceptions import ChordSheetError, FetchError, UnsupportedDialectError
from .logging_setup import setup_logging
from .models import ChordLyricsPair, Line
from .parser.cursor import ChordSheetParser
from .registry import dialect_names, get_classifier
from .song import Song
from .sources import load_sheet
from .tag import Tag

logger = logging.getLogger(__name__)


def _describe_item(item) -> str:
    if isinstance(item, Tag):
        return str(item)
    if isinstance(item, ChordLyricsPair):
        chords = item.chords.strip()
        return f"[{chords}]{item.lyrics}" if chords else item.lyrics
    return repr(item)


def describe_line(index: int, line: Line) -> str:
    """One outline row: line number, section type and the items of the line."""
    items = "".join(_describe_item(item) for item in line.items)
    return f"{index:>4} {line.type:<6} {items}".rstrip()


def describe_song(song: Song) -> list[str]:
    rows = [f"# {name}: {', '.join(song.metadata.get_all(name))}" for name in song.metadata]
    rows.extend(describe_line(i, line) for i, line in enumerate(song.lines, start=1))
    return rows


@click.command()
@click.argument("source")
@click.option("-d", "--dialect", default=None, metavar="NAME",
              help=f"Sheet dialect: {', '.join(dialect_names())} (default: $CHORDSHEET_DIALECT or ultimate-guitar).")
@click.option("-k", "--key", default=None, help="Transpose the song to this key.")
@click.option("-c", "--capo", default=None, help="Set the capo, or 'none' to remove it.")
@click.option("--debug", is_flag=True, default=False, help="Enable debug logging.")
def main(source: str, dialect: str | None, key: str | None, capo: str | None, debug: bool) -> None:
    """Parse a chord sheet and print an outline of its structure.

    \b
    SOURCE is a local text file or a tabs.ultimate-guitar.com URL.
    """
    config = load_config().override(dialect=dialect)
    setup_logging(debug, config.log_level)

    # --- Resolve dialect ---
    try:
        classifier = get_classifier(config.dialect)
    except UnsupportedDialectError as exc:
        click.echo(f"Error: {exc}", err=True)
        click.echo(f"Supported dialects: {', '.join(dialect_names())}", err=True)
        sys.exit(1)

    # --- Load + parse ---
    try:
        sheet = load_sheet(source)
    except FetchError as exc:
        msg = f"Error: Could not fetch {exc.url}"
        if exc.status_code:
            msg += f" (HTTP {exc.status_code})"
        click.echo(msg, err=True)
        sys.exit(1)
    except ChordSheetError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"Error: Could not read {source}: {exc.strerror}", err=True)
        sys.exit(1)

    parser = ChordSheetParser(classifier, preserve_whitespace=config.preserve_whitespace)
    song = parser.parse(sheet.text, song=Song(sheet.metadata))
    logger.debug("Parsed %s as %s: %d lines", sheet.source, config.dialect, len(song.lines))

    # --- Transform ---
    if key:
        song = song.set_key(key)
    if capo is not None:
        song = song.set_capo(None if capo.lower() == "none" else capo)

    # --- Output ---
    for row in describe_song(song):
        click.echo(row)
    for warning in song.warnings:
        click.echo(f"Warning: {warning}", err=True)

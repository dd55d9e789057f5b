"""Where chord sheet text comes from: a local file or an Ultimate Guitar page.

An Ultimate Guitar page embeds the sheet as JSON, either in the
``data-content`` attribute of the ``js-store`` div or, on older pages, in the
``__NEXT_DATA__`` script.  Only the sheet text (``wiki_tab.content``) and the
title, artist, key and capo are used.  The sheet marks chords as
``[ch]D[/ch]`` and wraps blocks in ``[tab]...[/tab]``; both markups are
stripped before the text reaches a line classifier.
"""

import html as html_module
import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from bs4 import BeautifulSoup

from .exceptions import ExtractError, FetchError, UnsupportedSourceError

logger = logging.getLogger(__name__)

_FETCH_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/webp,*/*;q=0.8"
    ),
    "Referer": "https://www.google.com/",
}

_CH_TAG_RE = re.compile(r"\[ch\]([^\[]*)\[/ch\]")
_TAB_TAG_RE = re.compile(r"\[/?tab\]")


@dataclass
class SheetText:
    """Raw sheet text plus whatever metadata the source knew about."""

    text: str
    metadata: dict[str, str] = field(default_factory=dict)
    source: str = ""


def strip_ug_tags(text: str) -> str:
    """Strip UG-specific markup from sheet content.

    - ``[ch]D[/ch]`` → ``D``
    - ``[tab]`` / ``[/tab]`` → removed
    """
    text = _CH_TAG_RE.sub(r"\1", text)
    return _TAB_TAG_RE.sub("", text)


def _extract_page_data(soup: BeautifulSoup, url: str) -> dict:
    """Return the ``page.data`` dict from whichever JSON container is present.

    Tries the current ``js-store`` format first, then falls back to the
    legacy ``__NEXT_DATA__`` format.
    """
    store_div = soup.find("div", class_="js-store")
    if store_div and store_div.get("data-content"):
        try:
            data = json.loads(html_module.unescape(store_div["data-content"]))
            return data["store"]["page"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError):
            logger.debug("js-store data unusable for %s, trying __NEXT_DATA__", url)

    script_tag = soup.find("script", id="__NEXT_DATA__")
    if script_tag and script_tag.string:
        try:
            data = json.loads(script_tag.string)
            return data["props"]["pageProps"]["data"]
        except (KeyError, TypeError, json.JSONDecodeError):
            logger.debug("__NEXT_DATA__ unusable for %s", url)

    raise ExtractError(url, "Could not find tab data (tried js-store and __NEXT_DATA__)")


class UltimateGuitarSource:
    """Fetches chord sheet text from tabs.ultimate-guitar.com."""

    @classmethod
    def can_handle(cls, url: str) -> bool:
        return "tabs.ultimate-guitar.com/tab/" in url

    def fetch(self, url: str) -> str:
        """GET the page with browser-like headers to avoid 403."""
        try:
            resp = httpx.get(url, headers=_FETCH_HEADERS, follow_redirects=True, timeout=15)
        except httpx.RequestError as exc:
            raise FetchError(url, 0) from exc
        if resp.status_code != 200:
            raise FetchError(url, resp.status_code)
        return resp.text

    def extract(self, html: str, url: str) -> SheetText:
        soup = BeautifulSoup(html, "html.parser")
        page_data = _extract_page_data(soup, url)

        # Metadata lives in page_data["tab"] (new) or page_data["tab_view"] (legacy).
        tab_meta = page_data.get("tab") or page_data.get("tab_view") or {}
        tab_view = page_data.get("tab_view") or {}

        wiki_tab = tab_view.get("wiki_tab") or {}
        content = wiki_tab.get("content") or ""
        if not content:
            raise ExtractError(url, "wiki_tab.content is empty or missing")

        metadata = {
            "title": tab_meta.get("song_name") or "",
            "artist": tab_meta.get("artist_name") or "",
            "key": tab_meta.get("tonality_name") or tab_view.get("tonality_name") or "",
            "capo": str(tab_meta.get("capo") or tab_view.get("capo") or ""),
        }
        return SheetText(
            text=strip_ug_tags(content),
            metadata={name: value for name, value in metadata.items() if value and value != "0"},
            source=url,
        )

    def load(self, url: str) -> SheetText:
        return self.extract(self.fetch(url), url)


def load_sheet(location: str) -> SheetText:
    """Return the sheet at *location*: an Ultimate Guitar URL or a file path."""
    if location.startswith(("http://", "https://")):
        if not UltimateGuitarSource.can_handle(location):
            raise UnsupportedSourceError(location)
        logger.info("Fetching %s", location)
        return UltimateGuitarSource().load(location)

    path = Path(location)
    return SheetText(text=path.read_text(encoding="utf-8"), source=str(path))

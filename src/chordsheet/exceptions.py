class ChordSheetError(Exception):
    """Base exception for chordsheet."""


class SongStateError(ChordSheetError, RuntimeError):
    """Raised when the Song API is used outside the state it requires.

    Malformed sheet text never raises this; it signals a caller bug, e.g.
    asking for the current line before any line exists.
    """


class UnsupportedDialectError(ChordSheetError):
    """Raised when no line classifier is registered under a dialect name."""

    def __init__(self, dialect: str):
        self.dialect = dialect
        super().__init__(f"No classifier registered for dialect: {dialect}")


class FetchError(ChordSheetError):
    """Raised when an HTTP request fails."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} fetching {url}")


class ExtractError(ChordSheetError):
    """Raised when chord sheet text cannot be extracted from a page."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Extract error for {url}: {reason}")


class UnsupportedSourceError(ChordSheetError):
    """Raised when a URL does not point at a supported site."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No source found for URL: {url}")

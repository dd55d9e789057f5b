import os
from dataclasses import dataclass, replace

DEFAULT_DIALECT = "ultimate-guitar"


@dataclass(frozen=True)
class ParserConfig:
    dialect: str = DEFAULT_DIALECT
    # Keep the padding after each chord symbol in ChordLyricsPair.chords
    preserve_whitespace: bool = True
    log_level: str | None = None

    def override(self, **changes) -> "ParserConfig":
        """Return a copy with every non-None entry of *changes* applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value not in ("0", "false", "False", "no")


def load_config() -> ParserConfig:
    return ParserConfig(
        dialect=os.getenv("CHORDSHEET_DIALECT", DEFAULT_DIALECT),
        preserve_whitespace=_env_flag("CHORDSHEET_PRESERVE_WHITESPACE", True),
        log_level=os.getenv("CHORDSHEET_LOG_LEVEL") or None,
    )

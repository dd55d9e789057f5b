import logging
import os


def setup_logging(debug: bool = False, level_name: str | None = None) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    # Env override, e.g. CHORDSHEET_LOG_LEVEL=INFO
    level_name = level_name or os.getenv("CHORDSHEET_LOG_LEVEL")
    if level_name and not debug:
        level = getattr(logging, level_name.upper(), level)

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

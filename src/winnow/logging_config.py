from __future__ import annotations

import logging

from winnow.config import get_settings

# Client libraries that log every request at INFO.
_CHATTY_LOGGERS = ("httpx", "openai", "httpcore")

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Set up root logging once per process.

    ``level`` overrides ``LOG_LEVEL`` from settings. Request logs from the
    LLM client stack are only shown at DEBUG.
    """
    global _configured
    if _configured:
        return

    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if level_name != "DEBUG":
        for name in _CHATTY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True

from __future__ import annotations

import logging

from rich.logging import RichHandler

# Client libraries that log every HTTP request at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(level: int | str = logging.INFO, *, quiet_clients: bool = True) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, markup=False, show_path=False)],
        force=True,
    )
    if quiet_clients:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(max(logging.WARNING, int(level)))

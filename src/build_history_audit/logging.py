from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    # pandas parse warnings end up in the same log stream as skip counts.
    logging.captureWarnings(True)

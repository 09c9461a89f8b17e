# team_core/logger.py
import logging
import sys

LOGGER_NAME = "team_core"

def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return a logger under the team_core namespace, configuring the root package logger once."""
    base = logging.getLogger(LOGGER_NAME)

    # Prevent duplicate handlers if imported multiple times
    if not base.handlers:
        base.setLevel(logging.INFO)
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        base.addHandler(stream_handler)

    if name == LOGGER_NAME:
        return base
    return logging.getLogger(f"{LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")

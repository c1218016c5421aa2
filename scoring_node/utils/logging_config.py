import logging
import sys

# Chatty at INFO; only their warnings reach the node log.
_QUIET_LOGGERS = ("sqlalchemy.engine", "alembic.runtime.migration", "uvicorn.access")


def setup_logging(level: int | str = logging.INFO):
    """Route every scoring node log line through one stdout handler."""
    root = logging.getLogger()
    root.setLevel(level)

    while root.hasHandlers():
        root.removeHandler(root.handlers[0])

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"
    ))
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """
    Configure the root logger once per process.

    Repeated calls only adjust the level so the app factory can be invoked
    several times (tests, reloads) without stacking handlers.
    """
    root = logging.getLogger()
    root.setLevel(level)
    if any(getattr(handler, "_todo_board", False) for handler in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler._todo_board = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    # SQL echo is controlled by DATABASE_ECHO, not the app log level.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

"""Logging helpers for stagewire modules.

All loggers live under the ``stagewire`` namespace and share one stderr
handler that prints ``[tag] message``, where *tag* is the logger name with
the namespace removed.
"""

from __future__ import annotations

import logging
import sys
import threading

_ROOT = "stagewire"
_PREFIX = _ROOT + "."

_lock = threading.Lock()
_handler: logging.Handler | None = None


class _TagFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(tag)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.tag = f"[{record.name.removeprefix(_PREFIX)}]"
        return super().format(record)


def setup_logging(verbose: bool = False) -> None:
    """Install the stderr handler on the ``stagewire`` logger once.

    The level is WARNING, or DEBUG when *verbose* is set. Records stop at the
    ``stagewire`` logger so pipeline definitions stay out of an application's
    root handlers.
    """
    global _handler
    with _lock:
        if _handler is not None:
            return
        root = logging.getLogger(_ROOT)
        root.setLevel(logging.DEBUG if verbose else logging.WARNING)
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(_TagFormatter())
        root.addHandler(_handler)
        root.propagate = False


def set_verbose(verbose: bool) -> None:
    """Switch the ``stagewire`` level after setup, e.g. to see build summaries."""
    setup_logging(verbose)
    logging.getLogger(_ROOT).setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return the ``stagewire.<name>`` logger, setting up the handler on first use."""
    setup_logging()
    return logging.getLogger(_PREFIX + name)

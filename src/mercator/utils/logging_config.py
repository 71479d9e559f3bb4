"""Logging configuration for the mercator package.

Modules obtain their logger through ``get_logger(__name__)`` and attach structured context
with ``extra={...}``. ``configure_logging`` renders that context as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import sys

from mercator.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Attributes present on every ``LogRecord``; anything else was passed through ``extra``.
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that appends the ``extra`` fields of a record as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the record and append its extra fields.

        Parameters
        ----------
        record : logging.LogRecord
            The record to format.

        Returns
        -------
        str
            The formatted log line.

        """
        line = super().format(record)
        extras = {key: value for key, value in vars(record).items() if key not in _RESERVED_ATTRS}
        if not extras:
            return line
        context = " ".join(f"{key}={value!r}" for key, value in sorted(extras.items()))
        return f"{line} [{context}]"


def configure_logging(level: str | int = LOG_LEVEL) -> None:
    """Install a stderr handler on the ``mercator`` logger.

    Calling this more than once replaces the previously installed handler.

    Parameters
    ----------
    level : str | int
        The logging level name or number (default: ``MERCATOR_LOG_LEVEL`` or ``INFO``).

    """
    root = logging.getLogger("mercator")
    for handler in list(root.handlers):
        if getattr(handler, "_mercator_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ExtraFieldsFormatter(LOG_FORMAT))
    handler._mercator_handler = True  # type: ignore[attr-defined]  # pylint: disable=protected-access
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a mercator module."""
    return logging.getLogger(name)

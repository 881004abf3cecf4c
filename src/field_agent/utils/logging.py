"""
Logging configuration module.

Provides centralized logging setup for the application with
configurable log levels. Records are rendered through Rich so they
print above the live run view instead of tearing it.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s: %(message)s"


class _FieldAgentHandler(RichHandler):
	"""RichHandler marker so repeated setup can find its own handler."""


def configure_logging(level: str = "info",
                      console: Console | None = None) -> None:
	"""
	Configure root logging with level, format and a Rich handler.

	Calling it again replaces the previously installed handler, which
	lets the CLI re-point logging at the console owned by the live view.

	Parameters:
		level: Log level string (e.g., "info", "debug", "warning").
		console: Console to write to; a stderr console when omitted.
	"""
	lvl = logging._nameToLevel.get(level.upper(), logging.INFO)
	root = logging.getLogger()
	for handler in list(root.handlers):
		if isinstance(handler, _FieldAgentHandler):
			root.removeHandler(handler)
	handler = _FieldAgentHandler(
	    console=console or Console(stderr=True),
	    show_path=False,
	    rich_tracebacks=True,
	)
	handler.setFormatter(logging.Formatter(LOG_FORMAT))
	root.addHandler(handler)
	root.setLevel(lvl)


def get_logger(name: str) -> logging.Logger:
	"""
	Get a logger for the specified module.

	Parameters:
		name: The logger name, typically __name__.

	Returns:
		Configured logger instance.
	"""
	return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]

"""Shared utility functions.

This subpackage provides common utility functions used across
the application with no dependencies on other subpackages.

Key modules:
    - parsing: Price and amount parsing
    - logging: Logging configuration
    - protocols: Protocol definitions for dependency injection
"""

from .parsing import parse_amount, format_amount
from .logging import configure_logging, get_logger
from .protocols import SchedulerProtocol, TimerHandleProtocol

__all__ = [
    # parsing
    "parse_amount",
    "format_amount",
    # logging
    "configure_logging",
    "get_logger",
    # protocols
    "SchedulerProtocol",
    "TimerHandleProtocol",
]

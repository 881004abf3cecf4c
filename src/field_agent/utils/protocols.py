"""
Protocol definitions for dependency injection.

Defines Protocol classes for the timer scheduler used by the engine so
tests can drive runs with a manual clock instead of the event loop.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol


class TimerHandleProtocol(Protocol):
	"""Handle for a single scheduled callback."""

	def cancel(self) -> None:
		"""Cancel the callback if it has not run yet."""
		...

	def cancelled(self) -> bool:
		"""Return True if the callback was cancelled."""
		...


class SchedulerProtocol(Protocol):
	"""
	Protocol for deferred callbacks.

	Matches the subset of ``asyncio.AbstractEventLoop`` the engine needs.
	"""

	def call_later(self, delay: float, callback: Callable[..., Any],
	               *args: Any) -> TimerHandleProtocol:
		"""Run ``callback(*args)`` once after ``delay`` seconds."""
		...


__all__ = ["TimerHandleProtocol", "SchedulerProtocol"]

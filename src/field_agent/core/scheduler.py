"""
Timer scheduling for the field agent engine.

``AsyncioScheduler`` adapts the running event loop to SchedulerProtocol.
``TimerSlot`` holds at most one outstanding timer: arming it cancels the
previous timer and issues a new token, and a callback only runs while
its token is still the current one.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

from field_agent.utils.logging import get_logger
from field_agent.utils.protocols import SchedulerProtocol, TimerHandleProtocol

logger = get_logger(__name__)


class AsyncioScheduler:
	"""SchedulerProtocol backed by an asyncio event loop.

	The loop is looked up on each call unless one is given, so the
	scheduler can be created before the loop starts running.
	"""

	def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
		self._loop = loop

	def call_later(self, delay: float, callback: Callable[..., Any],
	               *args: Any) -> TimerHandleProtocol:
		loop = self._loop or asyncio.get_running_loop()
		return loop.call_later(delay, callback, *args)


class TimerToken:
	"""Identity token for one armed timer."""

	__slots__ = ("label", )

	def __init__(self, label: str):
		self.label = label

	def __repr__(self) -> str:
		return f"TimerToken({self.label!r})"


class TimerSlot:
	"""A single-occupancy timer.

	Invariant: at most one scheduled callback is outstanding. Stale
	callbacks (cancelled handle that still fired, or a token superseded
	by a newer ``arm``) are dropped.
	"""

	def __init__(self, scheduler: SchedulerProtocol):
		self._scheduler = scheduler
		self._handle: Optional[TimerHandleProtocol] = None
		self._token: Optional[TimerToken] = None

	@property
	def pending(self) -> bool:
		return self._token is not None

	def arm(self, delay: float, callback: Callable[[], None],
	        label: str = "timer") -> TimerToken:
		"""Cancel any outstanding timer and schedule ``callback``."""
		self.cancel()
		token = TimerToken(label)
		self._token = token
		self._handle = self._scheduler.call_later(max(delay, 0.0), self._fire,
		                                          token, callback)
		return token

	def cancel(self) -> bool:
		"""Cancel the outstanding timer; return True if one was pending."""
		had_timer = self._token is not None
		if self._handle is not None:
			self._handle.cancel()
		self._handle = None
		self._token = None
		return had_timer

	def _fire(self, token: TimerToken, callback: Callable[[], None]) -> None:
		if token is not self._token:
			logger.debug("dropping stale timer %r", token)
			return
		self._handle = None
		self._token = None
		callback()


__all__ = ["AsyncioScheduler", "TimerToken", "TimerSlot"]

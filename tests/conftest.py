import heapq
import itertools

import pytest

from field_agent.core.engine import FieldAgentEngine
from field_agent.models.agent_config import AgentConfig


class ManualHandle:

	def __init__(self, when, seq, callback, args):
		self.when = when
		self.seq = seq
		self.callback = callback
		self.args = args
		self._cancelled = False

	def cancel(self):
		self._cancelled = True

	def cancelled(self):
		return self._cancelled

	def __lt__(self, other):
		return (self.when, self.seq) < (other.when, other.seq)


class ManualScheduler:
	"""Scheduler driven by an explicit clock.

	With ``honor_cancel=False`` cancelled callbacks still fire, which
	simulates a timer that was already dispatched when it got cancelled.
	"""

	def __init__(self, honor_cancel=True):
		self.now = 0.0
		self.honor_cancel = honor_cancel
		self._queue = []
		self._seq = itertools.count()

	def call_later(self, delay, callback, *args):
		handle = ManualHandle(self.now + delay, next(self._seq), callback,
		                      args)
		heapq.heappush(self._queue, handle)
		return handle

	@property
	def pending(self):
		return sum(1 for h in self._queue if not h.cancelled())

	def advance(self, seconds):
		target = self.now + seconds
		while self._queue and self._queue[0].when <= target + 1e-9:
			handle = heapq.heappop(self._queue)
			if handle.cancelled() and self.honor_cancel:
				continue
			self.now = max(self.now, handle.when)
			handle.callback(*handle.args)
		self.now = target

	def run_all(self, limit=1000):
		for _ in range(limit):
			live = [h for h in self._queue if not h.cancelled()]
			if not live:
				return
			self.advance(min(h.when for h in live) - self.now)
		raise AssertionError("scheduler did not go idle")


@pytest.fixture
def clock():
	return ManualScheduler()


@pytest.fixture
def engine(clock):
	eng = FieldAgentEngine(clock, confirmation_delay=1.5)
	yield eng
	eng.dispose()


@pytest.fixture
def scenario_config():
	return AgentConfig(
	    search_query="defektes macbook pro",
	    target_platform="eBay",
	    max_budget="200",
	    message_template="Hallo, ist '$title' für $price noch zu haben?",
	)

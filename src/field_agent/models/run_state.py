"""
Run state models.

Defines the lifecycle status of a field agent run, the owned mutable run
state with transition methods that keep its invariants, and the frozen
snapshot handed to the presentation layer.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from field_agent.errors import InvalidStateError
from .steps import DecisionItem, DecisionStep, LogStep, Step


class RunStatus(str, Enum):
	"""
	Lifecycle states for a run.

	IDLE: Run created, not yet started.
	RUNNING: Steps are being executed on a timer.
	PAUSED: Waiting for a decision on a listing.
	STOPPED: Finished or aborted; only a fresh start leaves this state.
	"""

	IDLE = "idle"
	RUNNING = "running"
	PAUSED = "paused"
	STOPPED = "stopped"


class RunSnapshot(BaseModel):
	"""Read-only view of a run for rendering."""

	model_config = ConfigDict(frozen=True)

	run_id: str
	status: RunStatus
	cursor: int
	total_steps: int
	log: tuple[str, ...] = ()
	pending_decision: Optional[DecisionItem] = None

	@property
	def finished(self) -> bool:
		return self.status == RunStatus.STOPPED


class AgentRun(BaseModel):
	"""Mutable state of one run.

	Every change goes through a transition method. Each method checks the
	current status first and raises InvalidStateError without touching
	anything when the transition is not allowed, so a rejected call can
	never leave ``log`` or ``cursor`` half-updated.
	"""

	run_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
	status: RunStatus = RunStatus.IDLE
	steps: List[Step] = Field(default_factory=list)
	cursor: int = 0
	log: List[str] = Field(default_factory=list)
	pending_decision: Optional[DecisionItem] = None
	started_at: Optional[datetime] = None

	@property
	def current_step(self) -> Step | None:
		if self.cursor < len(self.steps):
			return self.steps[self.cursor]
		return None

	@property
	def has_remaining(self) -> bool:
		return self.cursor < len(self.steps)

	def _require(self, *allowed: RunStatus) -> None:
		if self.status not in allowed:
			names = "/".join(s.value for s in allowed)
			raise InvalidStateError(
			    f"run {self.run_id} is {self.status.value}, expected {names}")

	def append(self, entry: str) -> None:
		"""Append an entry to the transcript."""
		self.log.append(entry)

	def begin(self) -> None:
		self._require(RunStatus.IDLE)
		self.status = RunStatus.RUNNING
		self.started_at = datetime.now(timezone.utc)

	def complete_log_step(self) -> LogStep:
		"""Emit the log step under the cursor and move past it."""
		self._require(RunStatus.RUNNING)
		step = self.current_step
		if not isinstance(step, LogStep):
			raise InvalidStateError(
			    f"run {self.run_id}: step {self.cursor} is not a log step")
		self.append(step.message)
		self.cursor += 1
		return step

	def pause_for(self, entry: str) -> DecisionItem:
		"""Park the run on the decision step under the cursor."""
		self._require(RunStatus.RUNNING)
		step = self.current_step
		if not isinstance(step, DecisionStep):
			raise InvalidStateError(
			    f"run {self.run_id}: step {self.cursor} is not a decision step")
		self.append(entry)
		self.pending_decision = step.item
		self.status = RunStatus.PAUSED
		return step.item

	def require_pending(self) -> DecisionItem:
		"""Return the pending decision or raise InvalidStateError."""
		self._require(RunStatus.PAUSED)
		if self.pending_decision is None:
			raise InvalidStateError(
			    f"run {self.run_id}: no decision is pending")
		return self.pending_decision

	def resolve(self, entry: str) -> DecisionItem:
		"""Clear the pending decision and move past its step."""
		item = self.require_pending()
		self.append(entry)
		self.pending_decision = None
		self.cursor += 1
		self.status = RunStatus.RUNNING
		return item

	def abort(self, entry: str) -> None:
		self._require(RunStatus.RUNNING, RunStatus.PAUSED)
		self.pending_decision = None
		self.status = RunStatus.STOPPED
		self.append(entry)

	def finish(self, entry: str) -> None:
		"""Mark a run whose cursor reached the end as complete."""
		self._require(RunStatus.RUNNING)
		if self.has_remaining:
			raise InvalidStateError(
			    f"run {self.run_id}: {len(self.steps) - self.cursor} "
			    "steps remain")
		self.status = RunStatus.STOPPED
		self.append(entry)

	def snapshot(self) -> RunSnapshot:
		return RunSnapshot(
		    run_id=self.run_id,
		    status=self.status,
		    cursor=self.cursor,
		    total_steps=len(self.steps),
		    log=tuple(self.log),
		    pending_decision=self.pending_decision,
		)


__all__ = ["RunStatus", "RunSnapshot", "AgentRun"]

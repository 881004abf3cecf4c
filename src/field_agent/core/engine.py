"""
Field agent simulation engine.

Drives an AgentRun through its scripted steps on a timer. Log steps
append to the transcript and advance on their own; decision steps park
the run until the presentation layer resolves them with send or skip.

Scheduling is cooperative: one outstanding main-sequence timer at a
time, held in a TimerSlot, plus a detached confirmation timer for every
message sent. Starting, stopping and disposing cancel timers before
touching run state, so a stale callback can never write into a run it
does not belong to.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Iterable, Optional, Union

from field_agent.errors import InvalidStateError
from field_agent.models.agent_config import AgentConfig
from field_agent.models.run_state import AgentRun, RunSnapshot, RunStatus
from field_agent.models.steps import (
    DecisionChoice,
    DecisionItem,
    DecisionStep,
    LogStep,
    Step,
    STEP_LIST_ADAPTER,
)
from field_agent.core.scheduler import AsyncioScheduler, TimerSlot
from field_agent.core.script import (
    ABORT_ENTRY,
    COMPLETE_ENTRY,
    build_steps,
    confirmation_entry,
    decision_entry,
    render_message,
    send_entry,
    skip_entry,
)
from field_agent.utils.logging import get_logger
from field_agent.utils.protocols import SchedulerProtocol, TimerHandleProtocol

logger = get_logger(__name__)

ScriptFactory = Callable[[AgentConfig, float],
                         Iterable[Union[Step, dict[str, Any]]]]
SnapshotListener = Callable[[RunSnapshot], None]


class FieldAgentEngine:
	"""
	Owns the current run and the timers that advance it.

	The presentation layer reads snapshots (``snapshot()`` or a
	``subscribe`` listener) and changes state only through ``start``,
	``stop`` and ``resolve_decision``.
	"""

	def __init__(
	    self,
	    scheduler: SchedulerProtocol | None = None,
	    *,
	    script: ScriptFactory = build_steps,
	    delay_scale: float = 1.0,
	    confirmation_delay: float = 1.5,
	) -> None:
		"""
		Initialize the engine.

		Parameters:
			scheduler: Timer source; the running asyncio loop by default.
			script: Builds the step list for a config and delay scale.
			delay_scale: Multiplier passed to the script for step delays.
			confirmation_delay: Seconds before a sent message is confirmed.

		Raises:
			ValueError: If a delay or scale is negative.
		"""
		if delay_scale < 0:
			raise ValueError(f"delay_scale must be >= 0, got {delay_scale}")
		if confirmation_delay < 0:
			raise ValueError(
			    f"confirmation_delay must be >= 0, got {confirmation_delay}")
		self._scheduler = scheduler or AsyncioScheduler()
		self._timer = TimerSlot(self._scheduler)
		self._script = script
		self._delay_scale = delay_scale
		self._confirmation_delay = confirmation_delay
		self._run: Optional[AgentRun] = None
		self._config: Optional[AgentConfig] = None
		self._confirmations: set[TimerHandleProtocol] = set()
		self._listeners: list[SnapshotListener] = []
		self._waiters: list[tuple[frozenset[RunStatus], asyncio.Future]] = []
		self._disposed = False

	# -- read side ---------------------------------------------------------

	@property
	def status(self) -> RunStatus:
		return self._run.status if self._run else RunStatus.IDLE

	@property
	def log(self) -> tuple[str, ...]:
		return tuple(self._run.log) if self._run else ()

	@property
	def cursor(self) -> int:
		return self._run.cursor if self._run else 0

	@property
	def pending_decision(self) -> Optional[DecisionItem]:
		return self._run.pending_decision if self._run else None

	@property
	def config(self) -> Optional[AgentConfig]:
		return self._config

	@property
	def disposed(self) -> bool:
		return self._disposed

	@property
	def timer_pending(self) -> bool:
		"""True while a main-sequence advance is scheduled."""
		return self._timer.pending

	@property
	def confirmations_pending(self) -> int:
		return len(self._confirmations)

	def snapshot(self) -> RunSnapshot:
		if self._run is None:
			return RunSnapshot(run_id="", status=RunStatus.IDLE, cursor=0,
			                   total_steps=0)
		return self._run.snapshot()

	def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
		"""Register a listener called with a snapshot after every change.

		Returns:
			A callable that removes the listener.
		"""
		self._listeners.append(listener)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	# -- operations --------------------------------------------------------

	def start(self, config: AgentConfig) -> None:
		"""
		Start a fresh run, superseding any previous one.

		Parameters:
			config: Parameters interpolated into the script.

		Raises:
			pydantic.ValidationError: If the script yields invalid steps; the
				previous run is left untouched.
		"""
		if self._disposed:
			logger.warning("start ignored: engine disposed")
			return
		steps = STEP_LIST_ADAPTER.validate_python(
		    list(self._script(config, self._delay_scale)))

		self._timer.cancel()
		self._cancel_confirmations()
		if self._run and self._run.status in (RunStatus.RUNNING,
		                                      RunStatus.PAUSED):
			logger.info("run %s superseded by restart", self._run.run_id)
		run = AgentRun(steps=steps)
		self._run = run
		self._config = config
		run.begin()
		logger.info(
		    "run %s started: %d steps, platform=%r query=%r budget=%r",
		    run.run_id,
		    len(steps),
		    config.target_platform,
		    config.search_query,
		    config.max_budget,
		)
		self._schedule_next(run)
		self._notify()

	def stop(self) -> bool:
		"""
		Abort the current run.

		Returns:
			True if a running or paused run was stopped, False if there
			was nothing to stop.
		"""
		run = None if self._disposed else self._run
		if run is None or run.status not in (RunStatus.RUNNING,
		                                     RunStatus.PAUSED):
			logger.debug("stop ignored: status=%s", self.status.value)
			return False
		self._timer.cancel()
		run.abort(ABORT_ENTRY)
		logger.info("run %s aborted at step %d/%d", run.run_id, run.cursor,
		            len(run.steps))
		self._notify()
		return True

	def resolve_decision(self, choice: DecisionChoice | str) -> bool:
		"""
		Answer the pending decision and resume the run.

		Calls made while no decision is pending are ignored and leave the
		run untouched.

		Parameters:
			choice: ``send`` or ``skip``.

		Returns:
			True if the decision was applied.

		Raises:
			ValueError: If ``choice`` is not a known decision.
		"""
		choice = DecisionChoice(choice)
		run = None if self._disposed else self._run
		if run is None:
			logger.warning("%s ignored: no active run", choice.value)
			return False
		try:
			item = run.require_pending()
		except InvalidStateError as exc:
			logger.warning("%s ignored: %s", choice.value, exc)
			return False

		if choice is DecisionChoice.SEND:
			message = render_message(self._config or AgentConfig(), item)
			run.resolve(send_entry(item, message))
			self._schedule_confirmation(run, item)
		else:
			run.resolve(skip_entry(item))
		logger.info("run %s: %s %s", run.run_id, choice.value, item.id)
		self._schedule_next(run)
		self._notify()
		return True

	def dispose(self) -> None:
		"""Cancel every outstanding timer; later calls become no-ops."""
		if self._disposed:
			return
		self._disposed = True
		self._timer.cancel()
		self._cancel_confirmations()
		self._listeners.clear()
		snap = self.snapshot()
		for _, fut in self._waiters:
			if not fut.done():
				fut.set_result(snap)
		self._waiters.clear()
		logger.debug("engine disposed (status=%s)", snap.status.value)

	async def wait_for_status(self, *statuses: RunStatus,
	                          timeout: float | None = None) -> RunSnapshot:
		"""
		Wait until the run reaches one of ``statuses``.

		Returns immediately if it already has. Also returns when the
		engine is disposed.

		Raises:
			asyncio.TimeoutError: If ``timeout`` elapses first.
		"""
		wanted = frozenset(statuses)
		if self.status in wanted or self._disposed:
			return self.snapshot()
		fut = asyncio.get_running_loop().create_future()
		entry = (wanted, fut)
		self._waiters.append(entry)
		try:
			return await asyncio.wait_for(fut, timeout)
		finally:
			if entry in self._waiters:
				self._waiters.remove(entry)

	async def wait_until_settled(self,
	                             timeout: float | None = None) -> RunSnapshot:
		"""Wait until the run is paused on a decision or stopped."""
		return await self.wait_for_status(RunStatus.PAUSED,
		                                  RunStatus.STOPPED,
		                                  timeout=timeout)

	def __enter__(self) -> "FieldAgentEngine":
		return self

	def __exit__(self, exc_type, exc, tb) -> None:
		self.dispose()

	async def __aenter__(self) -> "FieldAgentEngine":
		return self

	async def __aexit__(self, exc_type, exc, tb) -> None:
		self.dispose()

	# -- internals ---------------------------------------------------------

	def _schedule_next(self, run: AgentRun) -> None:
		"""Arm the timer for the step under the cursor, or finish."""
		step = run.current_step
		if step is None:
			run.finish(COMPLETE_ENTRY)
			logger.info("run %s complete (%d log entries)", run.run_id,
			            len(run.log))
			return
		self._timer.arm(step.delay, self._advance,
		                label=f"{run.run_id}:{run.cursor}")

	def _advance(self) -> None:
		run = self._run
		if run is None or run.status is not RunStatus.RUNNING:
			logger.debug("advance ignored: status=%s", self.status.value)
			return
		step = run.current_step
		if step is None:
			run.finish(COMPLETE_ENTRY)
		elif isinstance(step, LogStep):
			run.complete_log_step()
			logger.debug("run %s step %d: %s", run.run_id, run.cursor,
			             step.message)
			self._schedule_next(run)
		elif isinstance(step, DecisionStep):
			item = run.pause_for(decision_entry(step.item))
			logger.info("run %s paused on %s (%s)", run.run_id, item.id,
			            item.price)
		else:
			raise TypeError(f"unknown step type {type(step).__name__}")
		self._notify()

	def _schedule_confirmation(self, run: AgentRun,
	                           item: DecisionItem) -> None:
		handle: TimerHandleProtocol | None = None

		def confirm() -> None:
			self._confirmations.discard(handle)
			if self._disposed or self._run is not run:
				logger.debug("dropping confirmation for superseded run %s",
				             run.run_id)
				return
			run.append(confirmation_entry(item))
			self._notify()

		handle = self._scheduler.call_later(self._confirmation_delay, confirm)
		self._confirmations.add(handle)

	def _cancel_confirmations(self) -> None:
		for handle in self._confirmations:
			handle.cancel()
		self._confirmations.clear()

	def _notify(self) -> None:
		snap = self.snapshot()
		for listener in list(self._listeners):
			try:
				listener(snap)
			except Exception:
				logger.warning("snapshot listener failed", exc_info=True)
		for wanted, fut in list(self._waiters):
			if not fut.done() and snap.status in wanted:
				fut.set_result(snap)


__all__ = ["FieldAgentEngine", "ScriptFactory", "SnapshotListener"]

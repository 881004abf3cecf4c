"""
Terminal UI for the field agent.

Provides a Rich-based live view of a run: agent status, the activity
log and, while the run is paused, the listing awaiting a decision.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from collections import deque

from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text
from rich import box

from field_agent.models.agent_config import AgentConfig
from field_agent.models.run_state import RunSnapshot, RunStatus
from field_agent.models.steps import DecisionItem, DecisionStep, Step

STATUS_LABELS: dict[RunStatus, str] = {
    RunStatus.IDLE: "Idle",
    RunStatus.RUNNING: "Running...",
    RunStatus.PAUSED: "Paused",
    RunStatus.STOPPED: "Stopped",
}

STATUS_STYLES: dict[RunStatus, str] = {
    RunStatus.IDLE: "dim",
    RunStatus.RUNNING: "green",
    RunStatus.PAUSED: "yellow",
    RunStatus.STOPPED: "red",
}

DECISION_ANSWERS = ["send", "skip", "stop"]


def _entry_style(entry: str) -> str:
	lower = entry.lower()
	if "aborted" in lower:
		return "red"
	if lower.startswith("awaiting decision"):
		return "yellow"
	if "sent successfully" in lower or lower.startswith("run complete"):
		return "bold green"
	if lower.startswith("skipped"):
		return "dim"
	return "white"


@dataclass
class RunDisplayState:
	"""State of the run panel in the TUI."""

	run_id: str = ""
	status: RunStatus = RunStatus.IDLE
	cursor: int = 0
	total_steps: int = 0
	pending: DecisionItem | None = None
	log_size: int = 0
	messages: deque[str] = field(default_factory=deque)

	def apply(self, snap: RunSnapshot) -> None:
		"""Take over a new snapshot, appending only unseen log lines."""
		if snap.run_id != self.run_id:
			self.messages.clear()
			self.log_size = 0
			self.run_id = snap.run_id
		for entry in snap.log[self.log_size:]:
			self.messages.append(entry)
		self.log_size = len(snap.log)
		self.status = snap.status
		self.cursor = snap.cursor
		self.total_steps = snap.total_steps
		self.pending = snap.pending_decision

	def render_log(self) -> Text:
		text = Text()
		if not self.messages:
			text.append(
			    'Agent is awaiting commands. Start the agent to begin.\n',
			    style="dim")
			return text
		for msg in self.messages:
			text.append(f"• {msg}\n", style=_entry_style(msg))
		return text


def render_decision(item: DecisionItem) -> Panel:
	"""Render the listing a paused run is waiting on."""
	table = Table(box=None, show_header=False, expand=True)
	table.add_column("Field", style="bold")
	table.add_column("Value")
	table.add_row("Listing", item.title)
	table.add_row("Price", Text(item.price, style="cyan"))
	if item.description:
		table.add_row("Description", item.description)
	table.add_row("Image", Text(item.image_url, style="dim"))
	return Panel(table, title="User Decision Needed", border_style="yellow",
	             box=box.ROUNDED)


def render_script(steps: list[Step]) -> Table:
	"""Render a step list as a table."""
	table = Table(box=box.ROUNDED, expand=True, title="Field Agent Script")
	table.add_column("#", justify="right")
	table.add_column("Kind")
	table.add_column("Delay")
	table.add_column("Content")
	for i, step in enumerate(steps):
		if isinstance(step, DecisionStep):
			content = f"{step.item.title} ({step.item.price})"
			kind = Text("decision", style="yellow")
		else:
			content = step.message
			kind = Text("log")
		table.add_row(str(i), kind, f"{step.delay:g}s", content)
	return table


class TUI:
	"""
	Rich-based TUI for a field agent run.

	Uses Rich's Live display; ``update`` is a snapshot listener suitable
	for ``FieldAgentEngine.subscribe``.
	"""

	def __init__(self, agent_config: AgentConfig, visible_lines: int = 12,
	             console: Console | None = None):
		self.console = console or Console()
		self.agent_config = agent_config
		self.state = RunDisplayState(messages=deque(maxlen=visible_lines))
		self.live: Live | None = None

	def _build_view(self) -> Group:
		cfg = self.agent_config
		header = Table(box=box.ROUNDED, expand=True, show_header=True)
		header.add_column("Agent Status")
		header.add_column("Target Platform")
		header.add_column("Search Query")
		header.add_column("Max Budget (€)")
		header.add_column("Step")
		header.add_row(
		    Text(STATUS_LABELS[self.state.status],
		         style=STATUS_STYLES[self.state.status]),
		    cfg.target_platform,
		    cfg.search_query,
		    cfg.max_budget,
		    f"{self.state.cursor}/{self.state.total_steps}",
		)
		parts = [
		    header,
		    Panel(self.state.render_log(), title="Live Log", box=box.ROUNDED),
		]
		if self.state.pending is not None:
			parts.append(render_decision(self.state.pending))
		return Group(*parts)

	def __enter__(self):
		"""Start the Live display."""
		self.live = Live(
		    self._build_view(),
		    console=self.console,
		    refresh_per_second=4,
		)
		self.live.start()
		return self

	def __exit__(self, exc_type, exc, tb):
		"""Stop the Live display."""
		if self.live:
			self.live.stop()

	def update(self, snap: RunSnapshot) -> None:
		"""Apply a snapshot and refresh the display."""
		self.state.apply(snap)
		if self.live:
			self.live.update(self._build_view())

	def ask_decision(self, item: DecisionItem) -> str:
		"""
		Ask the user how to handle a listing.

		The live display is suspended while prompting.

		Returns:
			One of "send", "skip" or "stop".
		"""
		if self.live:
			self.live.stop()
		try:
			self.console.print(render_decision(item))
			return Prompt.ask(
			    "Send a message to the seller?",
			    choices=DECISION_ANSWERS,
			    default="send",
			    console=self.console,
			)
		finally:
			if self.live:
				self.live.start()

	def print_summary(self, snap: RunSnapshot) -> None:
		"""Print the final transcript after the run ends."""
		if self.live:
			self.live.stop()
		self.console.print()
		table = Table(
		    title="Agent Activity",
		    box=box.ROUNDED,
		    show_header=False,
		    expand=True,
		    title_style="bold cyan",
		)
		table.add_column("#", justify="right", style="dim")
		table.add_column("Entry")
		for i, entry in enumerate(snap.log, start=1):
			table.add_row(str(i), Text(entry, style=_entry_style(entry)))
		self.console.print(table)
		label = STATUS_LABELS[snap.status]
		self.console.print(
		    f"[bold]Status:[/bold] {label}  "
		    f"[bold]Steps:[/bold] {snap.cursor}/{snap.total_steps}")


__all__ = [
    "TUI",
    "RunDisplayState",
    "STATUS_LABELS",
    "render_decision",
    "render_script",
]

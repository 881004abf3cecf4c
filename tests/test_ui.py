import io
from collections import deque

from rich.console import Console

from field_agent.core.script import MACBOOK_PRO, build_steps
from field_agent.models.agent_config import AgentConfig
from field_agent.models.run_state import RunSnapshot, RunStatus
from field_agent.ui.tui import TUI, RunDisplayState, render_decision, render_script


def _console():
	return Console(file=io.StringIO(), width=120, force_terminal=False)


def _render(console, renderable):
	console.print(renderable)
	return console.file.getvalue()


def _snap(run_id="r1", log=(), status=RunStatus.RUNNING, pending=None):
	return RunSnapshot(run_id=run_id, status=status, cursor=len(log),
	                   total_steps=9, log=tuple(log), pending_decision=pending)


def test_display_state_appends_only_new_entries():
	state = RunDisplayState()
	state.apply(_snap(log=["a"]))
	state.apply(_snap(log=["a", "b"]))
	state.apply(_snap(log=["a", "b"]))
	assert list(state.messages) == ["a", "b"]
	assert state.cursor == 2
	assert state.total_steps == 9


def test_display_state_resets_on_new_run():
	state = RunDisplayState()
	state.apply(_snap(log=["a", "b", "c"]))
	state.apply(_snap(run_id="r2", log=["x"]))
	assert list(state.messages) == ["x"]
	assert state.run_id == "r2"


def test_display_state_message_limit():
	state = RunDisplayState(messages=deque(maxlen=12))
	state.apply(_snap(log=[f"entry {i}" for i in range(20)]))
	text = state.render_log()
	bullet_lines = [ln for ln in text.plain.splitlines() if ln.startswith("• ")]
	assert len(bullet_lines) == 12
	assert bullet_lines[-1] == "• entry 19"


def test_empty_log_shows_placeholder():
	assert "awaiting commands" in RunDisplayState().render_log().plain


def test_render_decision_panel():
	out = _render(_console(), render_decision(MACBOOK_PRO))
	assert "User Decision Needed" in out
	assert "MacBook Pro 2018 defekt" in out
	assert "150 €" in out


def test_render_script_lists_every_step():
	steps = build_steps(AgentConfig(target_platform="eBay"))
	table = render_script(steps)
	assert table.row_count == len(steps)
	out = _render(_console(), table)
	assert "Connecting to eBay..." in out
	assert "decision" in out


def test_tui_update_tracks_pending_decision():
	ui = TUI(AgentConfig(target_platform="eBay"), visible_lines=3,
	         console=_console())
	ui.update(
	    _snap(log=["1", "2", "3", "4"], status=RunStatus.PAUSED,
	          pending=MACBOOK_PRO))
	assert ui.state.pending == MACBOOK_PRO
	assert list(ui.state.messages) == ["2", "3", "4"]
	out = _render(ui.console, ui._build_view())
	assert "Paused" in out
	assert "User Decision Needed" in out


def test_tui_ask_decision_uses_prompt(monkeypatch):
	ui = TUI(AgentConfig(), console=_console())
	asked = {}

	def fake_ask(prompt, choices=None, default=None, console=None):
		asked["choices"] = choices
		asked["default"] = default
		return "skip"

	monkeypatch.setattr("field_agent.ui.tui.Prompt.ask", fake_ask)
	assert ui.ask_decision(MACBOOK_PRO) == "skip"
	assert asked["choices"] == ["send", "skip", "stop"]
	assert asked["default"] == "send"
	assert "MacBook Pro 2018 defekt" in ui.console.file.getvalue()


def test_tui_print_summary():
	ui = TUI(AgentConfig(), console=_console())
	ui.print_summary(
	    _snap(log=["hello", "Agent aborted by user."],
	          status=RunStatus.STOPPED))
	out = ui.console.file.getvalue()
	assert "Agent Activity" in out
	assert "Agent aborted by user." in out
	assert "Status: Stopped" in out

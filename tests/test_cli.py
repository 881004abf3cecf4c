import pytest
from pydantic import ValidationError

from field_agent.main import entrypoint


def _make_fake_run_impl():
	"""Return a (fake_run_impl, seen_dict) pair for monkeypatching."""
	seen = {}

	def fake_run_impl(
	    platform=None,
	    query=None,
	    max_budget=None,
	    template=None,
	    decisions=None,
	    delay_scale=None,
	):
		seen["platform"] = platform
		seen["query"] = query
		seen["max_budget"] = max_budget
		seen["template"] = template
		seen["decisions"] = decisions
		seen["delay_scale"] = delay_scale

	return fake_run_impl, seen


@pytest.fixture
def quiet_env(tmp_path, monkeypatch):
	"""Run from an empty directory with fast confirmations."""
	monkeypatch.chdir(tmp_path)
	for key in ("DEFAULT_TARGET_PLATFORM", "DEFAULT_SEARCH_QUERY",
	            "DEFAULT_MAX_BUDGET", "DEFAULT_MESSAGE_TEMPLATE",
	            "DECISION_POLICY", "STEP_DELAY_SCALE", "LOG_LEVEL"):
		monkeypatch.delenv(key, raising=False)
	monkeypatch.setenv("CONFIRMATION_DELAY_SECONDS", "0.01")


def test_cli_entrypoint_defaults_to_run(monkeypatch):
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("field_agent.main.run_impl", fake_run_impl)
	entrypoint(
	    [
	        "--platform",
	        "eBay",
	        "--query",
	        "defektes macbook pro",
	        "--max-budget",
	        "200",
	        "--decisions",
	        "budget",
	        "--delay-scale",
	        "0.5",
	    ],
	    standalone_mode=False,
	)
	assert seen["platform"] == "eBay"
	assert seen["query"] == "defektes macbook pro"
	assert seen["max_budget"] == "200"
	assert seen["template"] is None
	assert seen["decisions"] == "budget"
	assert seen["delay_scale"] == 0.5


def test_cli_entrypoint_without_args_runs(monkeypatch):
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("field_agent.main.run_impl", fake_run_impl)
	entrypoint([], standalone_mode=False)
	assert seen["platform"] is None
	assert seen["delay_scale"] is None


def test_cli_entrypoint_explicit_run(monkeypatch):
	"""'run --query x' is equivalent to '--query x'."""
	fake_run_impl, seen = _make_fake_run_impl()
	monkeypatch.setattr("field_agent.main.run_impl", fake_run_impl)
	entrypoint(["run", "--query", "ps5", "--template", "Hi $title"],
	           standalone_mode=False)
	assert seen["query"] == "ps5"
	assert seen["template"] == "Hi $title"


def test_cli_entrypoint_help_does_not_crash():
	"""--help should exit cleanly (SystemExit with code 0)."""
	with pytest.raises(SystemExit) as exc_info:
		entrypoint(["--help"], standalone_mode=True)
	assert exc_info.value.code == 0


def test_cli_script_command(quiet_env, capsys):
	entrypoint(["script", "--platform", "eBay"], standalone_mode=False)
	out = capsys.readouterr().out
	assert "Field Agent Script" in out
	assert "Connecting to eBay..." in out
	assert "MacBook Air 2020" in out


def test_cli_rejects_unknown_policy(quiet_env):
	with pytest.raises(ValidationError):
		entrypoint(["--decisions", "coinflip"], standalone_mode=False)


def test_cli_run_end_to_end(quiet_env, capsys):
	entrypoint(
	    [
	        "--platform",
	        "eBay",
	        "--max-budget",
	        "130",
	        "--decisions",
	        "budget",
	        "--delay-scale",
	        "0.001",
	    ],
	    standalone_mode=False,
	)
	out = capsys.readouterr().out
	assert "Running with platform=eBay" in out
	assert "Agent Activity" in out
	assert "Skipped 'MacBook Pro 2018 defekt'." in out
	assert "Run complete." in out
	assert "Status: Stopped" in out


def test_cli_interrupt_at_prompt_aborts_run(quiet_env, monkeypatch, capsys):

	def interrupted(self, item):
		raise KeyboardInterrupt

	monkeypatch.setattr("field_agent.main.TUI.ask_decision", interrupted)
	code = entrypoint(["--decisions", "interactive", "--delay-scale", "0.001"],
	                  standalone_mode=False)
	assert code == 130
	out = capsys.readouterr().out
	assert "Agent aborted by user." in out
	assert "Status: Stopped" in out

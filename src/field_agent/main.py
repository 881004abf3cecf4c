from __future__ import annotations

import asyncio
import sys
import threading

import typer
from rich.console import Console
from typer.main import get_command

from field_agent.core.engine import FieldAgentEngine
from field_agent.core.policy import DecisionPolicy, get_policy
from field_agent.core.script import build_steps
from field_agent.models.agent_config import AgentConfig
from field_agent.models.config import Config, load_env
from field_agent.models.run_params import RunParams
from field_agent.models.run_state import RunSnapshot, RunStatus
from field_agent.models.steps import DecisionChoice, DecisionItem
from field_agent.ui.tui import TUI, render_script
from field_agent.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

cli = typer.Typer(add_completion=False, no_args_is_help=True)


@cli.callback()
def root() -> None:
	"""
	Root callback for the field-agent CLI.

	Sets up the Typer application with no-args-is-help behavior.
	"""
	return None


async def ask_in_background(ui: TUI, item: DecisionItem) -> str:
	"""
	Ask the user about ``item`` on a daemon thread.

	The prompt blocks in ``input()``. The thread is not joined when the
	loop shuts down, so Ctrl-C at the prompt exits without waiting for
	Enter.

	Parameters:
		ui: TUI providing ``ask_decision``.
		item: Listing the run is paused on.

	Returns:
		The answer, or re-raises whatever the prompt raised.
	"""
	loop = asyncio.get_running_loop()
	fut: asyncio.Future[str] = loop.create_future()

	def settle(answer: str | None, exc: BaseException | None) -> None:
		if fut.done():
			return
		if exc is not None:
			fut.set_exception(exc)
		else:
			fut.set_result(answer)

	def worker() -> None:
		answer, error = None, None
		try:
			answer = ui.ask_decision(item)
		except BaseException as exc:  # forwarded to the awaiting task
			error = exc
		try:
			loop.call_soon_threadsafe(settle, answer, error)
		except RuntimeError:
			logger.debug("prompt answered after the event loop closed")

	threading.Thread(target=worker, name="decision-prompt", daemon=True).start()
	return await fut


async def drive(
    engine: FieldAgentEngine,
    agent_config: AgentConfig,
    policy: DecisionPolicy,
    ui: TUI,
    confirmation_delay: float,
) -> RunSnapshot:
	"""
	Run the engine until the run stops, answering every decision.

	Decisions go to ``policy`` first; when it returns None the user is
	asked through the TUI. Answering "stop" aborts the run.

	Parameters:
		engine: Engine to drive; must not be disposed.
		agent_config: Parameters for the run.
		policy: Decision policy.
		ui: TUI used for interactive prompts.
		confirmation_delay: Seconds to linger after the run so pending
			"message sent" confirmations still make it into the log.

	Returns:
		Snapshot of the finished run.
	"""
	engine.start(agent_config)
	try:
		while True:
			snap = await engine.wait_until_settled()
			if snap.status is RunStatus.STOPPED or engine.disposed:
				break
			item = snap.pending_decision
			if item is None:
				continue
			choice = policy(item, agent_config)
			if choice is None:
				answer = await ask_in_background(ui, item)
				if answer == "stop":
					engine.stop()
					continue
				choice = DecisionChoice(answer)
			engine.resolve_decision(choice)
		if engine.confirmations_pending:
			await asyncio.sleep(confirmation_delay)
	except asyncio.CancelledError:
		engine.stop()
		raise
	return engine.snapshot()


def run_impl(
    platform: str | None = None,
    query: str | None = None,
    max_budget: str | None = None,
    template: str | None = None,
    decisions: str | None = None,
    delay_scale: float | None = None,
) -> None:
	"""
	Run the field agent simulation in the terminal.

	Loads configuration, applies CLI overrides, then drives one run
	inside the live TUI and prints the transcript at the end.

	Parameters:
		platform: Override for the target platform.
		query: Override for the search query.
		max_budget: Override for the maximum budget.
		template: Override for the seller message template.
		decisions: Decision policy (interactive|send|skip|budget).
		delay_scale: Multiplier for scripted step delays.
	"""
	load_env()
	params = RunParams(
	    target_platform=platform,
	    search_query=query,
	    max_budget=max_budget,
	    message_template=template,
	    decisions=decisions,
	    delay_scale=delay_scale,
	)
	config = Config()
	config.apply_overrides(params)
	console = Console()
	configure_logging(config.log_level, console=console)
	agent_config = config.agent_config()
	policy = get_policy(config.decision_policy)
	typer.echo(f"Running with platform={agent_config.target_platform}, "
	           f"query={agent_config.search_query!r}, "
	           f"max_budget={agent_config.max_budget}, "
	           f"decisions={config.decision_policy}, "
	           f"delay_scale={config.step_delay_scale:g}")

	engine = FieldAgentEngine(
	    delay_scale=config.step_delay_scale,
	    confirmation_delay=config.confirmation_delay_seconds,
	)
	interrupted = False
	with TUI(agent_config, visible_lines=config.log_visible_lines,
	         console=console) as ui:
		engine.subscribe(ui.update)
		try:
			snap = asyncio.run(
			    drive(
			        engine,
			        agent_config,
			        policy,
			        ui,
			        config.confirmation_delay_seconds,
			    ))
		except KeyboardInterrupt:
			logger.info("interrupted, stopping run")
			interrupted = True
			engine.stop()
			snap = engine.snapshot()
		finally:
			engine.dispose()
		ui.print_summary(snap)
	if interrupted:
		raise typer.Exit(code=130)


@cli.command()
def run(
    platform: str = typer.Option(None, "--platform",
                                 help="Target platform, e.g. eBay"),
    query: str = typer.Option(None, "--query", help="Search query"),
    max_budget: str = typer.Option(None, "--max-budget",
                                   help="Maximum budget in euros"),
    template: str = typer.Option(
        None,
        "--template",
        help="Seller message template ($title, $price, $platform, $budget)",
    ),
    decisions: str = typer.Option(
        None,
        "--decisions",
        help="How to answer decisions: interactive, send, skip or budget",
    ),
    delay_scale: float = typer.Option(None, "--delay-scale",
                                      help="Multiplier for step delays"),
) -> None:
	"""
	Run the field agent with the given search parameters.

	Unset options fall back to DEFAULT_* environment settings.
	"""
	run_impl(platform, query, max_budget, template, decisions, delay_scale)


@cli.command("script")
def show_script(
    platform: str = typer.Option(None, "--platform"),
    query: str = typer.Option(None, "--query"),
    max_budget: str = typer.Option(None, "--max-budget"),
) -> None:
	"""Print the scripted steps a run would execute."""
	load_env()
	config = Config()
	config.apply_overrides(
	    RunParams(target_platform=platform, search_query=query,
	              max_budget=max_budget))
	steps = build_steps(config.agent_config(), config.step_delay_scale)
	Console().print(render_script(steps))


def entrypoint(argv=None, *, standalone_mode: bool = True):
	"""
	Typer entrypoint that defaults to `run` when appropriate.

	Allows calling 'field-agent --query "..."' without explicitly
	specifying the 'run' subcommand.

	Parameters:
		argv: Command-line arguments. Defaults to sys.argv[1:].
		standalone_mode: If True, Click handles exit codes.

	Returns:
		Result of the Click application main invocation.
	"""
	args = sys.argv[1:] if argv is None else list(argv)

	_click_app = get_command(cli)
	commands = getattr(_click_app, "commands", {}).keys()
	# default to run unless a subcommand or top-level help was requested
	if not args or (args[0] not in commands and args[0] != "--help"):
		args = ["run"] + args
	return _click_app.main(
	    args=args,
	    prog_name="field-agent",
	    standalone_mode=standalone_mode,
	)


if __name__ == "__main__":
	entrypoint()

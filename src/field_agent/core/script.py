"""
Field agent script.

Builds the fixed step sequence of a run and the transcript lines the
engine writes around it. The script has the same shape every run; only
the configured platform, query and budget are interpolated.
"""

from __future__ import annotations

from string import Template

from field_agent.models.agent_config import AgentConfig
from field_agent.models.steps import DecisionItem, DecisionStep, LogStep, Step

ABORT_ENTRY = "Agent aborted by user."
COMPLETE_ENTRY = "Run complete."

MACBOOK_PRO = DecisionItem(
    id="mbp-2018-defekt",
    title="MacBook Pro 2018 defekt",
    price="150 €",
    image_url="https://picsum.photos/seed/macbook-pro-2018/400/300",
    description=("Display zeigt Streifen, startet aber normal. Tastatur "
                 "funktioniert, Akku schwach. Nur Abholung."),
)

MACBOOK_AIR = DecisionItem(
    id="mba-2020-wasserschaden",
    title="MacBook Air 2020 Wasserschaden",
    price="120 €",
    image_url="https://picsum.photos/seed/macbook-air-2020/400/300",
    description=("Wasserschaden, geht nicht mehr an. Gehäuse in gutem "
                 "Zustand, Netzteil dabei."),
)


def build_steps(config: AgentConfig, delay_scale: float = 1.0) -> list[Step]:
	"""
	Generate the step sequence for a run.

	Parameters:
		config: Run parameters interpolated into the log messages.
		delay_scale: Multiplier applied to every step delay.

	Returns:
		Ordered list of steps; deterministic for a given config.
	"""
	platform = config.target_platform
	query = config.search_query

	def d(seconds: float) -> float:
		return seconds * delay_scale

	return [
	    LogStep(message=f"Field agent initializing for {platform}...",
	            delay=d(1.0)),
	    LogStep(message=f"Connecting to {platform}...", delay=d(1.5)),
	    LogStep(
	        message=(f"Searching for '{query}' "
	                 f"(max budget: {config.max_budget} €)..."),
	        delay=d(2.0),
	    ),
	    LogStep(message="12 listings found. Filtering by budget and condition...",
	            delay=d(1.5)),
	    DecisionStep(item=MACBOOK_PRO, delay=d(2.0)),
	    LogStep(message=f"Resuming search on {platform}...", delay=d(1.5)),
	    LogStep(message="Analyzing seller ratings and listing history...",
	            delay=d(1.0)),
	    DecisionStep(item=MACBOOK_AIR, delay=d(2.0)),
	    LogStep(
	        message=(f"Search for '{query}' finished. "
	                 "Reviewed 2 candidate listings."),
	        delay=d(1.0),
	    ),
	]


def render_message(config: AgentConfig, item: DecisionItem) -> str:
	"""Fill the seller message template for ``item``.

	Unknown placeholders are left as-is.
	"""
	return Template(config.message_template).safe_substitute(
	    title=item.title,
	    price=item.price,
	    platform=config.target_platform,
	    budget=config.max_budget,
	).strip()


def decision_entry(item: DecisionItem) -> str:
	return f"Awaiting decision: {item.title} ({item.price})"


def send_entry(item: DecisionItem, message: str) -> str:
	if message:
		return f"Sending message to seller of '{item.title}': {message}"
	return f"Sending message to seller of '{item.title}'."


def skip_entry(item: DecisionItem) -> str:
	return f"Skipped '{item.title}'."


def confirmation_entry(item: DecisionItem) -> str:
	return f"Message to seller of '{item.title}' sent successfully."


__all__ = [
    "ABORT_ENTRY",
    "COMPLETE_ENTRY",
    "MACBOOK_PRO",
    "MACBOOK_AIR",
    "build_steps",
    "render_message",
    "decision_entry",
    "send_entry",
    "skip_entry",
    "confirmation_entry",
]

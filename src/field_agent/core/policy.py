"""
Decision policies.

A policy answers a paused run on behalf of the user. Returning None
means "ask the user", which is what the interactive policy always does.
"""

from __future__ import annotations

from typing import Callable, Optional

from field_agent.models.agent_config import AgentConfig
from field_agent.models.steps import DecisionChoice, DecisionItem
from field_agent.utils.logging import get_logger
from field_agent.utils.parsing import format_amount, parse_amount

logger = get_logger(__name__)

DecisionPolicy = Callable[[DecisionItem, AgentConfig],
                          Optional[DecisionChoice]]


def interactive(item: DecisionItem,
                config: AgentConfig) -> Optional[DecisionChoice]:
	return None


def always_send(item: DecisionItem,
                config: AgentConfig) -> Optional[DecisionChoice]:
	return DecisionChoice.SEND


def always_skip(item: DecisionItem,
                config: AgentConfig) -> Optional[DecisionChoice]:
	return DecisionChoice.SKIP


def within_budget(item: DecisionItem,
                  config: AgentConfig) -> Optional[DecisionChoice]:
	"""
	Send when the listing price does not exceed the budget.

	Listings whose price or budget cannot be parsed are skipped.

	Parameters:
		item: Listing the run is paused on.
		config: Run parameters holding the budget.

	Returns:
		SEND or SKIP.
	"""
	price = parse_amount(item.price)
	budget = parse_amount(config.max_budget)
	if price is None or budget is None:
		logger.info("cannot compare price %r with budget %r, skipping %s",
		            item.price, config.max_budget, item.id)
		return DecisionChoice.SKIP
	choice = DecisionChoice.SEND if price <= budget else DecisionChoice.SKIP
	logger.debug("%s: price %s vs budget %s -> %s", item.id,
	             format_amount(price), format_amount(budget), choice.value)
	return choice


POLICIES: dict[str, DecisionPolicy] = {
    "interactive": interactive,
    "send": always_send,
    "skip": always_skip,
    "budget": within_budget,
}

POLICY_NAMES: tuple[str, ...] = tuple(POLICIES)


def get_policy(name: str) -> DecisionPolicy:
	"""Look up a policy by name (case-insensitive)."""
	try:
		return POLICIES[name.strip().lower()]
	except KeyError:
		raise ValueError(
		    f"unknown decision policy {name!r}; "
		    f"expected one of {', '.join(POLICY_NAMES)}") from None


__all__ = [
    "DecisionPolicy",
    "interactive",
    "always_send",
    "always_skip",
    "within_budget",
    "POLICIES",
    "POLICY_NAMES",
    "get_policy",
]

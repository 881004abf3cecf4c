from field_agent.core.script import (
    MACBOOK_PRO,
    build_steps,
    render_message,
    send_entry,
)
from field_agent.models.agent_config import AgentConfig
from field_agent.models.steps import DecisionStep, LogStep


def test_script_shape(scenario_config):
	steps = build_steps(scenario_config)
	kinds = [s.kind for s in steps]
	assert kinds == [
	    "log", "log", "log", "log", "decision", "log", "log", "decision", "log"
	]
	first, second = [s for s in steps if isinstance(s, DecisionStep)]
	assert first.item.title == "MacBook Pro 2018 defekt"
	assert second.item.title == "MacBook Air 2020 Wasserschaden"
	assert first.item.id != second.item.id


def test_script_is_deterministic(scenario_config):
	assert build_steps(scenario_config) == build_steps(scenario_config)


def test_script_interpolates_config():
	cfg = AgentConfig(target_platform="Vinted", search_query="ps5",
	                  max_budget=300)
	messages = [s.message for s in build_steps(cfg) if isinstance(s, LogStep)]
	assert "Connecting to Vinted..." in messages
	assert "Searching for 'ps5' (max budget: 300 €)..." in messages


def test_empty_config_is_legal():
	steps = build_steps(AgentConfig())
	assert len(steps) == 9
	assert steps[1].message == "Connecting to ..."


def test_delay_scale_multiplies_delays(scenario_config):
	normal = build_steps(scenario_config)
	fast = build_steps(scenario_config, delay_scale=0.5)
	for a, b in zip(normal, fast):
		assert b.delay == a.delay * 0.5


def test_render_message_substitutes_placeholders():
	cfg = AgentConfig(message_template="Hi! $title for $price on $platform, "
	                  "budget $budget. $unknown",
	                  target_platform="eBay", max_budget=200)
	assert render_message(cfg, MACBOOK_PRO) == (
	    "Hi! MacBook Pro 2018 defekt for 150 € on eBay, budget 200. $unknown")


def test_send_entry_without_message():
	assert send_entry(MACBOOK_PRO, "") == (
	    "Sending message to seller of 'MacBook Pro 2018 defekt'.")


def test_large_numeric_budget_is_logged_in_full():
	steps = build_steps(AgentConfig(search_query="ps5", max_budget=1234567))
	assert steps[2].message == "Searching for 'ps5' (max budget: 1234567 €)..."

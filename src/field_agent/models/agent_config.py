"""
Field agent configuration model.

Defines the AgentConfig Pydantic model captured from the configuration
form (or CLI options) before a run starts.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from field_agent.utils.parsing import format_amount


class AgentConfig(BaseModel):
	"""User-supplied parameters for one field agent run.

	Frozen once built; the script generator only reads it. Values are not
	validated beyond being coerced to strings, so an empty or nonsensical
	config is legal and simply ends up interpolated into the script.
	"""

	model_config = ConfigDict(frozen=True)

	target_platform: str = Field("", description="Marketplace to search")
	search_query: str = Field("", description="Search query to run")
	max_budget: str = Field(
	    "", description="Maximum budget in euros, kept as entered")
	message_template: str = Field(
	    "", description="Message sent to sellers ($title, $price placeholders)")

	@field_validator("max_budget", mode="before")
	@classmethod
	def budget_to_text(cls, v: Any) -> str:
		"""Accept raw numbers and render them in plain notation (no ``.0``)."""
		if v is None:
			return ""
		if isinstance(v, int):
			return str(v)
		if isinstance(v, float):
			return format_amount(Decimal(str(v)))
		return str(v)

	@field_validator("target_platform", "search_query", "message_template",
	                 mode="before")
	@classmethod
	def none_to_empty(cls, v: Any) -> str:
		return "" if v is None else str(v)


__all__ = ["AgentConfig"]

"""
Run parameters model.

Defines validated run parameters for CLI invocation. Every field is an
optional override of the matching environment-backed Config default.
"""

from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from field_agent.core.policy import POLICY_NAMES


class RunParams(BaseModel):
	"""Validated run parameters for the CLI."""

	target_platform: Optional[str] = Field(default=None,
	                                       description="Target platform")
	search_query: Optional[str] = Field(default=None,
	                                    description="Search query")
	max_budget: Optional[str] = Field(default=None,
	                                  description="Maximum budget (€)")
	message_template: Optional[str] = Field(
	    default=None, description="Seller message template")
	decisions: Optional[str] = Field(default=None,
	                                 description="Decision policy name")
	delay_scale: Optional[float] = Field(default=None,
	                                     description="Step delay multiplier")

	@field_validator('decisions')
	@classmethod
	def validate_decisions(cls, v: Optional[str]) -> Optional[str]:
		if v is None:
			return v
		name = v.strip().lower()
		if name not in POLICY_NAMES:
			raise ValueError(
			    f"decisions must be one of {', '.join(POLICY_NAMES)}")
		return name

	@field_validator('delay_scale')
	@classmethod
	def validate_positive(cls, v: Optional[float]) -> Optional[float]:
		if v is None:
			return v
		if v <= 0:
			raise ValueError("delay_scale must be > 0")
		return v


__all__ = ["RunParams"]

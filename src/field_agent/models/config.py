from __future__ import annotations

from pathlib import Path
from typing import Any, TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

from .agent_config import AgentConfig

if TYPE_CHECKING:
	from .run_params import RunParams

DEFAULT_MESSAGE_TEMPLATE = (
    "Hallo, ist '$title' noch verfügbar? Ich würde es für $price kaufen "
    "und kann es heute abholen.")


def load_env(env_file: str | Path | None = None) -> None:
	"""Load environment variables from an `.env` file if present."""
	env_path = Path(env_file) if env_file else Path(".env")
	if env_path.exists():
		load_dotenv(env_path)


class Config(BaseSettings):
	"""Runtime configuration loaded from environment variables."""

	model_config = SettingsConfigDict(env_prefix="", case_sensitive=False)

	log_level: str = Field("warning", alias="LOG_LEVEL",
	                       description="Log level for the application")
	step_delay_scale: float = Field(
	    1.0,
	    alias="STEP_DELAY_SCALE",
	    description="Multiplier applied to every scripted step delay",
	)
	confirmation_delay_seconds: float = Field(
	    1.5,
	    alias="CONFIRMATION_DELAY_SECONDS",
	    description="Delay before a sent message is confirmed in the log",
	)
	log_visible_lines: int = Field(
	    12,
	    alias="LOG_VISIBLE_LINES",
	    description="Number of log lines shown in the live view",
	)
	decision_policy: str = Field(
	    "interactive",
	    alias="DECISION_POLICY",
	    description="How paused runs are answered (interactive|send|skip|budget)",
	)
	default_target_platform: str = Field(
	    "Kleinanzeigen",
	    alias="DEFAULT_TARGET_PLATFORM",
	    description="Target platform when none is given",
	)
	default_search_query: str = Field(
	    "defektes macbook pro",
	    alias="DEFAULT_SEARCH_QUERY",
	    description="Search query when none is given",
	)
	default_max_budget: str = Field(
	    "200",
	    alias="DEFAULT_MAX_BUDGET",
	    description="Maximum budget in euros when none is given",
	)
	default_message_template: str = Field(
	    DEFAULT_MESSAGE_TEMPLATE,
	    alias="DEFAULT_MESSAGE_TEMPLATE",
	    description="Seller message template when none is given",
	)

	@field_validator("step_delay_scale", "confirmation_delay_seconds",
	                 "log_visible_lines")
	@classmethod
	def validate_positive(cls, v: Any, info: "ValidationInfo") -> Any:
		if v is None:
			return v
		if float(v) <= 0:
			raise ValueError(f"{info.field_name} must be > 0")
		return v

	@field_validator("decision_policy")
	@classmethod
	def validate_policy(cls, v: str) -> str:
		from field_agent.core.policy import POLICY_NAMES

		name = v.strip().lower()
		if name not in POLICY_NAMES:
			raise ValueError(
			    f"decision_policy must be one of {', '.join(POLICY_NAMES)}")
		return name

	def apply_overrides(self, run_params: "RunParams") -> None:
		"""Apply CLI overrides from RunParams onto this config.

		Only non-None fields in run_params are applied, preserving
		environment-based defaults for anything the user didn't explicitly set.

		Parameters:
			run_params: Validated run parameters with optional overrides.
		"""
		_OVERRIDES: list[tuple[str, str]] = [
		    ("target_platform", "default_target_platform"),
		    ("search_query", "default_search_query"),
		    ("max_budget", "default_max_budget"),
		    ("message_template", "default_message_template"),
		    ("decisions", "decision_policy"),
		    ("delay_scale", "step_delay_scale"),
		]
		for param_field, config_field in _OVERRIDES:
			value = getattr(run_params, param_field)
			if value is not None:
				setattr(self, config_field, value)

	def agent_config(self) -> AgentConfig:
		"""Build the AgentConfig for a run from the current defaults."""
		return AgentConfig(
		    target_platform=self.default_target_platform,
		    search_query=self.default_search_query,
		    max_budget=self.default_max_budget,
		    message_template=self.default_message_template,
		)


__all__ = ["Config", "load_env", "DEFAULT_MESSAGE_TEMPLATE"]

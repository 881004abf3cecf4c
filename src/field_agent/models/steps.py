"""
Script step models.

A run's script is an ordered list of steps. Each step is either a plain
log emission that advances on its own, or a decision pause that waits
for the user to send a message to a seller or skip the listing.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class DecisionItem(BaseModel):
	"""A candidate listing surfaced during a run."""

	model_config = ConfigDict(frozen=True)

	id: str = Field(description="Identifier, unique within a run")
	title: str
	price: str = Field(description="Currency-formatted price, e.g. '150 €'")
	image_url: str = Field(description="Image reference (URI)")
	description: str = ""


class LogStep(BaseModel):
	"""Informational step; appends its message once the delay elapses."""

	model_config = ConfigDict(frozen=True)

	kind: Literal["log"] = "log"
	message: str
	delay: float = Field(ge=0, description="Seconds before the step runs")


class DecisionStep(BaseModel):
	"""Pauses the run on ``item`` once the delay elapses."""

	model_config = ConfigDict(frozen=True)

	kind: Literal["decision"] = "decision"
	item: DecisionItem
	delay: float = Field(ge=0, description="Seconds before the step runs")


Step = Annotated[Union[LogStep, DecisionStep], Field(discriminator="kind")]

STEP_LIST_ADAPTER: TypeAdapter[list[Step]] = TypeAdapter(list[Step])


class DecisionChoice(str, Enum):
	"""Answer to a paused run.

	SEND: message the seller, then continue.
	SKIP: ignore the listing and continue.
	"""

	SEND = "send"
	SKIP = "skip"


__all__ = [
    "DecisionItem",
    "LogStep",
    "DecisionStep",
    "Step",
    "STEP_LIST_ADAPTER",
    "DecisionChoice",
]

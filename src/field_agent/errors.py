"""Exception types raised by the field agent."""

from __future__ import annotations


class FieldAgentError(Exception):
	"""Base class for field agent errors."""


class InvalidStateError(FieldAgentError):
	"""An operation was attempted in a state that does not allow it.

	Raised by the run model, e.g. resolving a decision while nothing is
	pending. The engine recovers from it locally and leaves the run
	untouched.
	"""


__all__ = ["FieldAgentError", "InvalidStateError"]

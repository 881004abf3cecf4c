"""Core logic for the field agent simulation.

Key modules:
    - engine: FieldAgentEngine state machine driving a run
    - script: Scripted step sequence and transcript lines
    - scheduler: Cancellable timer abstraction over asyncio
    - policy: Automatic answers for paused runs
"""

from field_agent.core.engine import FieldAgentEngine
from field_agent.core.script import build_steps, render_message
from field_agent.core.scheduler import AsyncioScheduler, TimerSlot, TimerToken
from field_agent.core.policy import (
    DecisionPolicy,
    POLICIES,
    POLICY_NAMES,
    get_policy,
)

__all__ = [
    # engine
    "FieldAgentEngine",
    # script
    "build_steps",
    "render_message",
    # scheduler
    "AsyncioScheduler",
    "TimerSlot",
    "TimerToken",
    # policy
    "DecisionPolicy",
    "POLICIES",
    "POLICY_NAMES",
    "get_policy",
]

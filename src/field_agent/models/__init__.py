"""
Field agent models.

This subpackage contains Pydantic models for configuration, run
parameters, the scripted steps and the mutable run state.

Key models:
    - Config: Application configuration loaded from environment
    - RunParams: CLI overrides for a run
    - AgentConfig: Parameters of a single field agent run
    - LogStep / DecisionStep: Scripted steps
    - AgentRun: Owned mutable run state
    - RunSnapshot: Read-only view for rendering
"""

from .agent_config import AgentConfig
from .config import Config, load_env
from .steps import (
    DecisionChoice,
    DecisionItem,
    DecisionStep,
    LogStep,
    Step,
    STEP_LIST_ADAPTER,
)
from .run_state import AgentRun, RunSnapshot, RunStatus

__all__ = [
    "AgentConfig",
    "Config",
    "load_env",
    "DecisionChoice",
    "DecisionItem",
    "DecisionStep",
    "LogStep",
    "Step",
    "STEP_LIST_ADAPTER",
    "AgentRun",
    "RunSnapshot",
    "RunStatus",
]

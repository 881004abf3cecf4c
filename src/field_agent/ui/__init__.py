"""User interface components.

This subpackage provides the terminal presentation layer for the
field agent.

Key modules:
    - tui: Rich-based live view, decision prompt and run summary
"""

from field_agent.ui.tui import (
    TUI,
    RunDisplayState,
    STATUS_LABELS,
    render_decision,
    render_script,
)

__all__ = [
    "TUI",
    "RunDisplayState",
    "STATUS_LABELS",
    "render_decision",
    "render_script",
]

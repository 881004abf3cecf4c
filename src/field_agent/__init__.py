"""
Field Agent - scripted marketplace field agent simulation.

Simulates a field agent that searches a marketplace for listings,
pausing on candidates so the user can message the seller or skip.

Main entry points:
    - field_agent.main: CLI entrypoint
    - field_agent.core.engine: FieldAgentEngine state machine
    - field_agent.models.config: Config and load_env()
"""

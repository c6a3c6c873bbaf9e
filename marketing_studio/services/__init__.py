"""External clients and the generation orchestrator."""

"""Pipeline orchestration for launch-gate checks."""

from launchgate.pipeline.orchestrator import (
    CheckOutcome,
    CheckState,
    FailureStage,
    GateOrchestrator,
    create_orchestrator,
)

__all__ = [
    "CheckOutcome",
    "CheckState",
    "FailureStage",
    "GateOrchestrator",
    "create_orchestrator",
]

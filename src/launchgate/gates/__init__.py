"""Gates module: launch-time gating decisions.

Key concepts:
- Configuration: Parsed remote document (alert / optional / required update)
- DismissalMemory: What the user has already dismissed
- GateDecisionEngine: Picks at most one gate per check
"""

from launchgate.gates.models import (
    AlertSpec,
    UpdateSpec,
    Configuration,
    Decision,
    DecisionKind,
    RememberableItem,
    RememberedEntry,
    UserAction,
)
from launchgate.gates.memory import (
    DismissalMemory,
    GuardedDismissalMemory,
    InMemoryDismissalMemory,
    SqliteDismissalMemory,
)
from launchgate.gates.version import (
    VersionComparator,
    VersionStrategy,
    VersionUnavailableError,
    is_older,
)
from launchgate.gates.engine import GateDecisionEngine, decide

__all__ = [
    # Models
    "AlertSpec",
    "UpdateSpec",
    "Configuration",
    "Decision",
    "DecisionKind",
    "RememberableItem",
    "RememberedEntry",
    "UserAction",
    # Memory
    "DismissalMemory",
    "GuardedDismissalMemory",
    "InMemoryDismissalMemory",
    "SqliteDismissalMemory",
    # Versions
    "VersionComparator",
    "VersionStrategy",
    "VersionUnavailableError",
    "is_older",
    # Engine
    "GateDecisionEngine",
    "decide",
]

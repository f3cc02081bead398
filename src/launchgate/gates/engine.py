"""Gate decision engine.

Chooses at most one gate to surface for a parsed configuration. The
sections are evaluated in precedence order and only the first present
one is considered:

1. required update (if the app version is known and older)
2. optional update (if known, older, and not already dismissed)
3. alert (if blocking, or not already dismissed)

A present-but-suppressed section does not fall through to the next.
"""

from __future__ import annotations

import logging

from launchgate.gates.memory import DismissalMemory
from launchgate.gates.models import AlertSpec, Configuration, Decision, UpdateSpec
from launchgate.gates.version import VersionComparator, VersionStrategy

logger = logging.getLogger(__name__)


class GateDecisionEngine:
    """Evaluates a configuration against the app version and dismissals.

    Read-only with respect to memory; safe to share across checks.
    """

    def __init__(self, comparator: VersionComparator | None = None):
        """Initialize engine with optional version comparator."""
        self._comparator = comparator or VersionComparator()

    @property
    def comparator(self) -> VersionComparator:
        return self._comparator

    def decide(
        self,
        config: Configuration,
        app_version: str | None,
        memory: DismissalMemory,
    ) -> Decision:
        """Produce exactly one decision for this configuration."""
        if config.required_update is not None and app_version is not None:
            if self.should_show_required_update(config.required_update, app_version):
                return Decision.show_required_update(config.required_update)
            return Decision.no_action()

        if config.optional_update is not None and app_version is not None:
            if self.should_show_optional_update(
                config.optional_update, app_version, memory
            ):
                return Decision.show_optional_update(config.optional_update)
            return Decision.no_action()

        if app_version is None and (
            config.required_update is not None or config.optional_update is not None
        ):
            logger.debug("Update gates skipped: app version unknown")

        if config.alert is not None:
            if self.should_show_alert(config.alert, memory):
                return Decision.show_alert(config.alert, config.alert.blocking)
            return Decision.no_action()

        return Decision.no_action()

    def should_show_required_update(self, update: UpdateSpec, app_version: str) -> bool:
        return self._comparator.is_older(app_version, update.minimum_version)

    def should_show_optional_update(
        self,
        update: UpdateSpec,
        app_version: str,
        memory: DismissalMemory,
    ) -> bool:
        if memory.contains(update):
            return False
        return self._comparator.is_older(app_version, update.minimum_version)

    def should_show_alert(self, alert: AlertSpec, memory: DismissalMemory) -> bool:
        # Blocking alerts are re-shown on every launch
        return alert.blocking or not memory.contains(alert)


def decide(
    config: Configuration,
    app_version: str | None,
    memory: DismissalMemory,
    strategy: VersionStrategy = VersionStrategy.LEXICOGRAPHIC,
) -> Decision:
    """Evaluate a configuration with a one-off engine."""
    engine = GateDecisionEngine(VersionComparator(strategy))
    return engine.decide(config, app_version, memory)

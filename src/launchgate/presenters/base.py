"""Presentation protocol and a scripted presenter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from launchgate.gates.models import Decision, DecisionKind, UserAction


@runtime_checkable
class Presenter(Protocol):
    """Protocol for gate presenters.

    Implementations:
    - ConsolePresenter: rich panels and click prompts
    - RecordingPresenter: Records decisions, returns a scripted action
    """

    async def present(self, decision: Decision) -> UserAction | None:
        """Show a decision and wait until the user is done with it.

        Args:
            decision: A decision with is_action == True

        Returns:
            The user's choice, or None when the gate offers no choice
            (blocking alerts)
        """
        ...


@dataclass
class RecordingPresenter:
    """Presenter that records what it was asked to show.

    Useful for dry runs and tests; never touches a terminal.
    """

    action: UserAction | None = UserAction.DISMISSED
    presented: list[Decision] = field(default_factory=list)

    async def present(self, decision: Decision) -> UserAction | None:
        self.presented.append(decision)
        if decision.kind is DecisionKind.SHOW_ALERT and decision.blocking:
            return None
        return self.action

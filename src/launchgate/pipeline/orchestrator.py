"""Orchestration of one launch-gate check.

Wires together the collaborators for a single cycle:
1. Fetch the configuration document
2. Parse it into a Configuration
3. Decide which gate (if any) to surface
4. Present the decision
5. Remember dismissable gates

Fetch and parse failures end the cycle quietly: nothing is shown and
dismissal memory is untouched. Memory failures never abort a cycle: a
failed lookup reads as "not dismissed" and a failed write only leaves
the dismissal unrecorded. check() never raises for any of them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional, Union

from launchgate.gates.engine import GateDecisionEngine
from launchgate.gates.memory import DismissalMemory, GuardedDismissalMemory
from launchgate.gates.models import Configuration, Decision, UserAction
from launchgate.gates.version import VersionComparator, current_app_version
from launchgate.presenters.base import Presenter
from launchgate.remote.fetch import FetchError, Fetcher, fetcher_for_url
from launchgate.remote.parser import JsonConfigParser, ParseError, Parser

if TYPE_CHECKING:
    from launchgate.config import Settings

logger = logging.getLogger(__name__)

AppVersionSource = Union[str, None, Callable[[], Optional[str]]]
PresenterSource = Union[Presenter, Callable[[], Optional[Presenter]]]


class CheckState(str, Enum):
    """States of a check cycle."""

    IDLE = "idle"
    FETCHING = "fetching"
    PARSING = "parsing"
    DECIDING = "deciding"
    PRESENTING = "presenting"
    REMEMBERING = "remembering"


class FailureStage(str, Enum):
    """Where an aborted cycle stopped."""

    FETCH = "fetch"
    PARSE = "parse"
    PRESENT = "present"


@dataclass
class CheckOutcome:
    """Result of one check() call."""

    check_id: int
    decision: Decision | None = None
    action: UserAction | None = None
    presented: bool = False
    remembered: bool = False
    superseded: bool = False
    failure: FailureStage | None = None
    error: str | None = None
    states: list[CheckState] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the cycle ran to completion."""
        return self.failure is None and not self.superseded

    def to_dict(self) -> dict:
        """Serialize for CLI/JSON output."""
        return {
            "check_id": self.check_id,
            "decision": self.decision.to_dict() if self.decision else None,
            "action": self.action.value if self.action else None,
            "presented": self.presented,
            "remembered": self.remembered,
            "superseded": self.superseded,
            "failure": self.failure.value if self.failure else None,
            "error": self.error,
        }


class GateOrchestrator:
    """Runs fetch -> parse -> decide -> present -> remember cycles.

    Each check() runs one independent cycle. Presentation is serialized
    so only one gate is on screen at a time. The presenter may be given
    as a lookup callable; it is resolved when a decision is ready, not
    when the check starts.
    """

    def __init__(
        self,
        *,
        config_url: str,
        fetcher: Fetcher,
        parser: Parser,
        memory: DismissalMemory,
        presenter: PresenterSource,
        app_version: AppVersionSource = None,
        engine: GateDecisionEngine | None = None,
        drop_superseded: bool = False,
    ):
        self._config_url = config_url
        self._fetcher = fetcher
        self._parser = parser
        self._memory = memory
        self._guarded_memory = GuardedDismissalMemory(memory)
        self._presenter = presenter
        self._app_version = app_version
        self._engine = engine or GateDecisionEngine()
        self._drop_superseded = drop_superseded
        self._present_lock = asyncio.Lock()
        self._latest_check_id = 0
        self._state = CheckState.IDLE

    @property
    def state(self) -> CheckState:
        """Most recent state entered by any cycle."""
        return self._state

    @property
    def memory(self) -> DismissalMemory:
        return self._memory

    @property
    def config_url(self) -> str:
        return self._config_url

    async def check(self) -> CheckOutcome:
        """Run one check cycle.

        Returns:
            CheckOutcome describing what happened; failures are reported
            in the outcome rather than raised
        """
        self._latest_check_id += 1
        outcome = CheckOutcome(check_id=self._latest_check_id)

        try:
            await self._run_cycle(outcome)
        finally:
            self._enter(outcome, CheckState.IDLE)

        return outcome

    def check_sync(self) -> CheckOutcome:
        """Run one check cycle from synchronous code."""
        return asyncio.run(self.check())

    async def _run_cycle(self, outcome: CheckOutcome) -> None:
        self._enter(outcome, CheckState.FETCHING)
        try:
            data = await self._fetcher.fetch(self._config_url)
        except FetchError as e:
            logger.warning(f"Configuration fetch failed: {e}")
            self._fail(outcome, FailureStage.FETCH, e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error fetching {self._config_url}: {e}")
            self._fail(outcome, FailureStage.FETCH, e)
            return

        if not data:
            logger.warning(f"Configuration fetch returned no data: {self._config_url}")
            self._fail(outcome, FailureStage.FETCH, "empty response")
            return

        if self._drop_superseded and outcome.check_id != self._latest_check_id:
            logger.info(
                f"Check {outcome.check_id} superseded by {self._latest_check_id}"
            )
            outcome.superseded = True
            return

        self._enter(outcome, CheckState.PARSING)
        try:
            config = self._parser.parse(data)
        except ParseError as e:
            logger.warning(f"Configuration parse failed: {e}")
            self._fail(outcome, FailureStage.PARSE, e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error parsing configuration: {e}")
            self._fail(outcome, FailureStage.PARSE, e)
            return

        if config is None:
            self._fail(outcome, FailureStage.PARSE, "parser returned no configuration")
            return

        self._enter(outcome, CheckState.DECIDING)
        decision = self.evaluate(config)
        outcome.decision = decision
        logger.info(f"Check {outcome.check_id} decision: {decision.kind.value}")

        if not decision.is_action:
            return

        await self._present(outcome, decision)

    def evaluate(self, config: Configuration) -> Decision:
        """Decide for a configuration with the current app version."""
        return self._engine.decide(
            config, self._resolve_app_version(), self._guarded_memory
        )

    async def _present(self, outcome: CheckOutcome, decision: Decision) -> None:
        async with self._present_lock:
            self._enter(outcome, CheckState.PRESENTING)
            try:
                presenter = self._resolve_presenter()
                if presenter is None:
                    logger.info("No presentation target available; gate not shown")
                    return
                outcome.action = await presenter.present(decision)
            except Exception as e:
                logger.exception(f"Presenting {decision.kind.value} failed: {e}")
                self._fail(outcome, FailureStage.PRESENT, e)
                return
            outcome.presented = True

        if decision.should_remember and decision.spec is not None:
            self._enter(outcome, CheckState.REMEMBERING)
            outcome.remembered = self._guarded_memory.remember(decision.spec)

    def _resolve_presenter(self) -> Presenter | None:
        if isinstance(self._presenter, Presenter):
            return self._presenter
        return self._presenter()

    def _resolve_app_version(self) -> str | None:
        source = self._app_version
        if not callable(source):
            return source
        try:
            return source()
        except Exception as e:
            logger.warning(f"App version lookup failed, update gates skipped: {e}")
            return None

    def _enter(self, outcome: CheckOutcome, state: CheckState) -> None:
        logger.debug(f"Check {outcome.check_id}: {self._state.value} -> {state.value}")
        self._state = state
        outcome.states.append(state)

    def _fail(
        self,
        outcome: CheckOutcome,
        stage: FailureStage,
        error: Exception | str,
    ) -> None:
        outcome.failure = stage
        outcome.error = str(error)


def create_orchestrator(
    settings: "Settings",
    presenter: PresenterSource,
    memory: DismissalMemory,
) -> GateOrchestrator:
    """Build an orchestrator from settings.

    Args:
        settings: Loaded settings (config_url must be set)
        presenter: Presenter or presenter lookup
        memory: Dismissal memory to read and update

    Raises:
        ValueError: If settings.config_url is not set
    """
    if not settings.config_url:
        raise ValueError("No configuration URL set")

    return GateOrchestrator(
        config_url=settings.config_url,
        fetcher=fetcher_for_url(settings.config_url, timeout=settings.fetch_timeout),
        parser=JsonConfigParser(platform=settings.platform),
        memory=memory,
        presenter=presenter,
        app_version=lambda: current_app_version(
            settings.app_version, settings.distribution
        ),
        engine=GateDecisionEngine(VersionComparator(settings.version_strategy)),
        drop_superseded=settings.drop_superseded,
    )

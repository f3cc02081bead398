"""Tests for the gate decision engine.

Precedence is required update > optional update > alert, and only the
first present section is evaluated.
"""

import pytest

from launchgate.gates.engine import GateDecisionEngine, decide
from launchgate.gates.memory import InMemoryDismissalMemory
from launchgate.gates.models import (
    AlertSpec,
    Configuration,
    Decision,
    DecisionKind,
    UpdateSpec,
)
from launchgate.gates.version import VersionComparator, VersionStrategy


@pytest.fixture
def memory():
    return InMemoryDismissalMemory()


@pytest.fixture
def engine():
    return GateDecisionEngine()


REQUIRED = UpdateSpec(message="You must update", minimum_version="2.0")
OPTIONAL = UpdateSpec(message="Update available", minimum_version="2.0")
ALERT = AlertSpec(message="Maintenance tonight", blocking=False)
BLOCKING_ALERT = AlertSpec(message="Service closed", blocking=True)


class TestRequiredUpdate:
    """Required update gate."""

    def test_older_version_shows_required(self, engine, memory):
        config = Configuration(required_update=REQUIRED)

        decision = engine.decide(config, "1.5", memory)

        assert decision.kind is DecisionKind.SHOW_REQUIRED_UPDATE
        assert decision.spec == REQUIRED

    def test_required_wins_over_everything(self, engine, memory):
        """Optional update, alert and memory contents are irrelevant."""
        config = Configuration(
            alert=BLOCKING_ALERT,
            optional_update=OPTIONAL,
            required_update=REQUIRED,
        )
        memory.remember(REQUIRED)
        memory.remember(OPTIONAL)

        decision = engine.decide(config, "1.0", memory)

        assert decision == Decision.show_required_update(REQUIRED)

    def test_current_version_is_no_action_without_fallthrough(self, engine, memory):
        """A present but satisfied required update suppresses later sections."""
        config = Configuration(
            alert=ALERT,
            optional_update=UpdateSpec(message="x", minimum_version="3.0"),
            required_update=REQUIRED,
        )

        decision = engine.decide(config, "2.5", memory)

        assert decision.kind is DecisionKind.NO_ACTION

    def test_unknown_version_skips_to_alert(self, engine, memory):
        config = Configuration(alert=ALERT, required_update=REQUIRED)

        decision = engine.decide(config, None, memory)

        assert decision.kind is DecisionKind.SHOW_ALERT

    def test_unknown_version_without_alert(self, engine, memory):
        config = Configuration(required_update=REQUIRED, optional_update=OPTIONAL)
        assert engine.decide(config, None, memory).kind is DecisionKind.NO_ACTION


class TestOptionalUpdate:
    """Optional update gate."""

    def test_not_remembered_and_older(self, engine, memory):
        config = Configuration(optional_update=OPTIONAL)

        decision = engine.decide(config, "1.5", memory)

        assert decision == Decision.show_optional_update(OPTIONAL)

    def test_remembered_is_no_action(self, engine, memory):
        memory.remember(OPTIONAL)
        config = Configuration(optional_update=OPTIONAL)

        assert engine.decide(config, "1.5", memory).kind is DecisionKind.NO_ACTION

    def test_new_version_invalidates_dismissal(self, engine, memory):
        memory.remember(OPTIONAL)
        newer = UpdateSpec(message="Update available", minimum_version="2.1")
        config = Configuration(optional_update=newer)

        decision = engine.decide(config, "1.5", memory)

        assert decision.kind is DecisionKind.SHOW_OPTIONAL_UPDATE

    def test_up_to_date_is_no_action(self, engine, memory):
        config = Configuration(optional_update=OPTIONAL, alert=ALERT)
        assert engine.decide(config, "2.0", memory).kind is DecisionKind.NO_ACTION

    def test_optional_wins_over_alert(self, engine, memory):
        config = Configuration(optional_update=OPTIONAL, alert=ALERT)

        decision = engine.decide(config, "1.5", memory)

        assert decision.kind is DecisionKind.SHOW_OPTIONAL_UPDATE


class TestAlert:
    """Informational alert gate."""

    def test_non_blocking_alert_shown_once(self, engine, memory):
        config = Configuration(alert=ALERT)

        first = engine.decide(config, "1.0", memory)
        memory.remember(ALERT)
        second = engine.decide(config, "1.0", memory)

        assert first == Decision.show_alert(ALERT, False)
        assert second.kind is DecisionKind.NO_ACTION

    def test_blocking_alert_always_shown(self, engine, memory):
        config = Configuration(alert=BLOCKING_ALERT)
        memory.remember(BLOCKING_ALERT)

        for _ in range(3):
            decision = engine.decide(config, "1.0", memory)
            assert decision.kind is DecisionKind.SHOW_ALERT
            assert decision.blocking is True

    def test_changed_message_is_shown_again(self, engine, memory):
        memory.remember(ALERT)
        config = Configuration(alert=AlertSpec(message="Maintenance tomorrow"))

        assert engine.decide(config, "1.0", memory).kind is DecisionKind.SHOW_ALERT

    def test_alert_identifier_is_the_fingerprint(self, engine, memory):
        memory.remember(AlertSpec(message="Old wording", identifier="notice-1"))
        config = Configuration(alert=AlertSpec(message="New wording", identifier="notice-1"))

        assert engine.decide(config, "1.0", memory).kind is DecisionKind.NO_ACTION

    def test_alert_without_app_version(self, engine, memory):
        config = Configuration(alert=ALERT)
        assert engine.decide(config, None, memory).kind is DecisionKind.SHOW_ALERT


class TestEmptyAndStrategies:
    """Edge cases and comparator injection."""

    def test_empty_configuration(self, engine, memory):
        assert engine.decide(Configuration(), "1.0", memory) == Decision.no_action()

    def test_end_to_end_scenario(self, memory):
        config = Configuration(
            required_update=None,
            optional_update=UpdateSpec(message="Update available", minimum_version="2.0"),
            alert=AlertSpec(message="Maintenance tonight", blocking=False),
        )

        decision = decide(config, "1.5", memory)

        assert decision.kind is DecisionKind.SHOW_OPTIONAL_UPDATE
        assert decision.message == "Update available"

    def test_lexicographic_engine_misses_double_digit(self, memory):
        config = Configuration(required_update=UpdateSpec(message="m", minimum_version="10.0"))
        assert decide(config, "9.0", memory).kind is DecisionKind.NO_ACTION

    def test_numeric_engine_handles_double_digit(self, memory):
        engine = GateDecisionEngine(VersionComparator(VersionStrategy.NUMERIC))
        config = Configuration(required_update=UpdateSpec(message="m", minimum_version="10.0"))

        assert engine.decide(config, "9.0", memory).kind is DecisionKind.SHOW_REQUIRED_UPDATE

    def test_comparator_defaults_to_lexicographic(self, engine):
        assert engine.comparator.strategy is VersionStrategy.LEXICOGRAPHIC

    def test_injected_comparator_exposed(self):
        comparator = VersionComparator(VersionStrategy.NUMERIC)
        assert GateDecisionEngine(comparator).comparator is comparator

    def test_engine_does_not_write_memory(self, engine, memory):
        config = Configuration(alert=ALERT, optional_update=OPTIONAL)
        engine.decide(config, "1.0", memory)
        assert memory.values == {}


class TestDecision:
    """Decision helpers."""

    def test_should_remember(self):
        assert Decision.show_alert(ALERT, False).should_remember
        assert Decision.show_optional_update(OPTIONAL).should_remember
        assert not Decision.show_alert(BLOCKING_ALERT, True).should_remember
        assert not Decision.show_required_update(REQUIRED).should_remember
        assert not Decision.no_action().should_remember

    def test_to_dict(self):
        data = Decision.show_optional_update(OPTIONAL).to_dict()
        assert data == {
            "kind": "show_optional_update",
            "blocking": False,
            "message": "Update available",
            "minimum_version": "2.0",
        }

"""Gate message models.

Defines the parsed remote configuration, the messages it carries, and
the single decision produced for each check.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union, runtime_checkable

ALERT_REMEMBER_KEY = "alert"
UPDATE_REMEMBER_KEY = "update"


@runtime_checkable
class RememberableItem(Protocol):
    """A gate message whose dismissal can be remembered.

    Two items sharing a key but carrying different remember strings are
    different messages: dismissing one never suppresses the other.
    """

    @property
    def remember_key(self) -> str:
        """Stable slot identifier (e.g. "alert")."""
        ...

    @property
    def remember_string(self) -> str:
        """Fingerprint of the current message content."""
        ...


@dataclass(frozen=True)
class AlertSpec:
    """One-off informational notice."""

    message: str
    blocking: bool = False
    identifier: str | None = None

    @property
    def remember_key(self) -> str:
        return ALERT_REMEMBER_KEY

    @property
    def remember_string(self) -> str:
        if self.identifier is not None:
            return self.identifier
        return self.message


@dataclass(frozen=True)
class UpdateSpec:
    """Update prompt.

    Whether it is optional or required depends on the configuration
    section it was read from, not on a field here.
    """

    message: str
    minimum_version: str

    @property
    def remember_key(self) -> str:
        return UPDATE_REMEMBER_KEY

    @property
    def remember_string(self) -> str:
        return self.minimum_version


@dataclass(frozen=True)
class RememberedEntry:
    """A raw (key, string) pair read back from dismissal storage."""

    key: str
    value: str

    @property
    def remember_key(self) -> str:
        return self.key

    @property
    def remember_string(self) -> str:
        return self.value


@dataclass(frozen=True)
class Configuration:
    """Parsed remote document for one check cycle.

    Every section is independently optional; a missing section means no
    such gate is configured this cycle.
    """

    alert: AlertSpec | None = None
    optional_update: UpdateSpec | None = None
    required_update: UpdateSpec | None = None

    @property
    def is_empty(self) -> bool:
        return (
            self.alert is None
            and self.optional_update is None
            and self.required_update is None
        )


class DecisionKind(Enum):
    """Outcome variants of a gate evaluation."""

    NO_ACTION = "no_action"
    SHOW_ALERT = "show_alert"
    SHOW_OPTIONAL_UPDATE = "show_optional_update"
    SHOW_REQUIRED_UPDATE = "show_required_update"


GateSpec = Union[AlertSpec, UpdateSpec]


@dataclass(frozen=True)
class Decision:
    """The single gating result of one evaluation."""

    kind: DecisionKind
    spec: GateSpec | None = None
    blocking: bool = False

    @classmethod
    def no_action(cls) -> "Decision":
        return cls(kind=DecisionKind.NO_ACTION)

    @classmethod
    def show_alert(cls, spec: AlertSpec, blocking: bool) -> "Decision":
        return cls(kind=DecisionKind.SHOW_ALERT, spec=spec, blocking=blocking)

    @classmethod
    def show_optional_update(cls, spec: UpdateSpec) -> "Decision":
        return cls(kind=DecisionKind.SHOW_OPTIONAL_UPDATE, spec=spec)

    @classmethod
    def show_required_update(cls, spec: UpdateSpec) -> "Decision":
        # Required updates can never be dismissed
        return cls(kind=DecisionKind.SHOW_REQUIRED_UPDATE, spec=spec, blocking=True)

    @property
    def is_action(self) -> bool:
        """True if something should be presented."""
        return self.kind is not DecisionKind.NO_ACTION

    @property
    def should_remember(self) -> bool:
        """True if presenting this decision records a dismissal.

        Only non-blocking alerts and optional updates are remembered.
        """
        if self.kind is DecisionKind.SHOW_OPTIONAL_UPDATE:
            return True
        return self.kind is DecisionKind.SHOW_ALERT and not self.blocking

    @property
    def message(self) -> str | None:
        return self.spec.message if self.spec is not None else None

    def to_dict(self) -> dict:
        """Serialize for CLI/JSON output."""
        result: dict = {"kind": self.kind.value, "blocking": self.blocking}
        if isinstance(self.spec, AlertSpec):
            result["message"] = self.spec.message
        elif isinstance(self.spec, UpdateSpec):
            result["message"] = self.spec.message
            result["minimum_version"] = self.spec.minimum_version
        return result


class UserAction(Enum):
    """What the user did with a presented gate."""

    DISMISSED = "dismissed"
    ACCEPTED_UPDATE = "accepted_update"

"""Version comparison for update gates.

The default strategy compares version strings lexicographically, so
"10.0" sorts before "9.0". Configuration documents written against that
ordering keep working; the NUMERIC strategy is opt-in.
"""

from __future__ import annotations

import logging
from enum import Enum
from importlib import metadata

from packaging.version import InvalidVersion, Version

from launchgate.errors import LaunchGateError

logger = logging.getLogger(__name__)


class VersionUnavailableError(LaunchGateError):
    """Raised when the host cannot report the current app version."""

    pass


class VersionStrategy(str, Enum):
    """How two version strings are ordered."""

    LEXICOGRAPHIC = "lexicographic"
    NUMERIC = "numeric"


class VersionComparator:
    """Decides whether an installed version is older than a minimum.

    Never raises: strings the NUMERIC strategy cannot parse are ordered
    lexicographically instead.
    """

    def __init__(self, strategy: VersionStrategy = VersionStrategy.LEXICOGRAPHIC):
        self.strategy = VersionStrategy(strategy)

    def is_older(self, current: str, minimum: str) -> bool:
        """Check whether `current` sorts before `minimum`."""
        if self.strategy is VersionStrategy.NUMERIC:
            try:
                return Version(current) < Version(minimum)
            except InvalidVersion:
                logger.debug(
                    f"Non-numeric version pair ({current!r}, {minimum!r}), "
                    "comparing lexicographically"
                )
        return current < minimum


def is_older(
    current: str,
    minimum: str,
    strategy: VersionStrategy = VersionStrategy.LEXICOGRAPHIC,
) -> bool:
    """Module-level shortcut for VersionComparator(strategy).is_older."""
    return VersionComparator(strategy).is_older(current, minimum)


def installed_version(distribution: str) -> str:
    """Look up the installed version of a distribution.

    Args:
        distribution: Distribution name as known to the package index

    Returns:
        Version string from the installed metadata

    Raises:
        VersionUnavailableError: If the distribution is not installed
    """
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError as e:
        raise VersionUnavailableError(
            f"Distribution not installed: {distribution}"
        ) from e


def current_app_version(
    explicit: str | None = None,
    distribution: str | None = None,
) -> str | None:
    """Resolve the running app's version, or None if it cannot be known.

    An explicit version wins; otherwise the distribution's installed
    metadata is consulted.
    """
    if explicit:
        return explicit
    if not distribution:
        return None
    try:
        return installed_version(distribution)
    except VersionUnavailableError as e:
        logger.info(f"App version unavailable, update gates skipped: {e}")
        return None

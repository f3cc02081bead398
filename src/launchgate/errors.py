"""Error types shared across LaunchGate."""

from __future__ import annotations


class LaunchGateError(Exception):
    """Base class for expected, non-fatal LaunchGate failures."""

    pass

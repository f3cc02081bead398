"""LaunchGate: remote launch-time alerts and update prompts."""

__version__ = "0.1.0"

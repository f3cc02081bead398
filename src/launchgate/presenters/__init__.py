"""Gate presenters."""

from launchgate.presenters.base import Presenter, RecordingPresenter
from launchgate.presenters.console import ConsolePresenter

__all__ = [
    "Presenter",
    "RecordingPresenter",
    "ConsolePresenter",
]

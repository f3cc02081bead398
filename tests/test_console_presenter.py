"""Tests for the terminal presenter."""

import io
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from launchgate.gates.models import AlertSpec, Decision, UpdateSpec, UserAction
from launchgate.presenters.base import Presenter
from launchgate.presenters.console import ConsolePresenter

STORE_URL = "https://store.example.com/app/123"


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def open_url():
    return MagicMock()


def make_presenter(output, open_url, interactive=False, update_url=STORE_URL):
    return ConsolePresenter(
        update_url=update_url,
        console=Console(file=output, width=80),
        interactive=interactive,
        open_url=open_url,
    )


class TestConsolePresenter:
    """Rendering and user choices."""

    def test_is_a_presenter(self, output, open_url):
        assert isinstance(make_presenter(output, open_url), Presenter)

    @pytest.mark.asyncio
    async def test_dismissable_alert(self, output, open_url):
        presenter = make_presenter(output, open_url)

        action = await presenter.present(Decision.show_alert(AlertSpec("Maintenance tonight"), False))

        assert action is UserAction.DISMISSED
        assert "Maintenance tonight" in output.getvalue()
        assert "Notice" in output.getvalue()
        open_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_blocking_alert_has_no_choice(self, output, open_url):
        presenter = make_presenter(output, open_url)

        action = await presenter.present(Decision.show_alert(AlertSpec("Closed", True), True))

        assert action is None
        assert "cannot be dismissed" in output.getvalue()

    @pytest.mark.asyncio
    async def test_optional_update_declined_without_input(self, output, open_url):
        presenter = make_presenter(output, open_url)

        action = await presenter.present(
            Decision.show_optional_update(UpdateSpec("Update available", "2.0"))
        )

        assert action is UserAction.DISMISSED
        assert "Update Available" in output.getvalue()
        open_url.assert_not_called()

    @pytest.mark.asyncio
    async def test_optional_update_accepted(self, output, open_url):
        presenter = make_presenter(output, open_url, interactive=True)

        with patch("launchgate.presenters.console.click.confirm", return_value=True):
            action = await presenter.present(
                Decision.show_optional_update(UpdateSpec("Update available", "2.0"))
            )

        assert action is UserAction.ACCEPTED_UPDATE
        open_url.assert_called_once_with(STORE_URL)

    @pytest.mark.asyncio
    async def test_required_update_opens_store(self, output, open_url):
        presenter = make_presenter(output, open_url)

        action = await presenter.present(
            Decision.show_required_update(UpdateSpec("You must update", "2.0"))
        )

        assert action is UserAction.ACCEPTED_UPDATE
        assert "Update Required" in output.getvalue()
        open_url.assert_called_once_with(STORE_URL)

    @pytest.mark.asyncio
    async def test_missing_store_url(self, output, open_url, caplog):
        presenter = make_presenter(output, open_url, update_url=None)

        await presenter.present(Decision.show_required_update(UpdateSpec("m", "2.0")))

        open_url.assert_not_called()
        assert "No update URL configured" in caplog.text

"""
Tests for the command-line entry point.
"""

from unittest.mock import AsyncMock, patch

import pytest

from carousell_watch.main import async_main, main
from carousell_watch.orchestrator import RunSummary
from carousell_watch.utils.error_handling import ConfigurationError, NotificationDeliveryError


@pytest.fixture(autouse=True)
def console_logging(monkeypatch):
    monkeypatch.setenv("LOG_DIR", "")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


class TestAsyncMain:
    """Test cases for async_main exit codes."""

    @pytest.mark.asyncio
    async def test_success_returns_zero(self):
        with patch("carousell_watch.main.run_watch", new=AsyncMock(return_value=RunSummary())) as mock_run:
            assert await async_main("config.yaml") == 0

        mock_run.assert_awaited_once_with("config.yaml")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [ConfigurationError("bad config"), NotificationDeliveryError("smtp down"), RuntimeError("boom")],
    )
    async def test_failure_returns_one(self, error):
        with patch("carousell_watch.main.run_watch", new=AsyncMock(side_effect=error)):
            assert await async_main(None) == 1


class TestMain:
    """Test cases for main."""

    def test_exit_code_and_config_argument(self):
        with patch("carousell_watch.main.run_watch", new=AsyncMock(return_value=RunSummary())) as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                main(["alerts.yaml"])

        assert exc_info.value.code == 0
        mock_run.assert_awaited_once_with("alerts.yaml")

    def test_failure_exit_code(self):
        with patch("carousell_watch.main.run_watch", new=AsyncMock(side_effect=ConfigurationError("x"))):
            with pytest.raises(SystemExit) as exc_info:
                main([])

        assert exc_info.value.code == 1

"""
Tests for the process entry point: channel wiring, signal handling and exit codes.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from unittest.mock import patch

import pytest

import main
from discord_alert import DiscordNotifier
from fee_monitor import FeeClaimMonitor
from telegram_alert import TelegramNotifier

from conftest import FakeDataSource, StoppingDataSource, raw_creator, raw_fee_entry

WEBHOOK = "https://discord.com/api/webhooks/123/abc"
NO_CHANNEL = {
    "ENABLE_DISCORD": True,
    "DISCORD_WEBHOOK_URL": "",
    "ENABLE_TELEGRAM": False,
    "TELEGRAM_BOT_TOKEN": "",
    "TELEGRAM_CHAT_ID": "",
}


def cycle(claimed_sol: float):
    return [raw_fee_entry(creators=[raw_creator(claimed_sol=claimed_sol)])], []


class TestBuildNotifiers:
    def test_discord_only(self) -> None:
        notifiers = main.build_notifiers(dict(NO_CHANNEL, DISCORD_WEBHOOK_URL=WEBHOOK, REQUEST_TIMEOUT_SECONDS=3))

        assert len(notifiers) == 1
        assert isinstance(notifiers[0], DiscordNotifier)
        assert notifiers[0].timeout == 3

    def test_telegram_only(self) -> None:
        config = dict(NO_CHANNEL, ENABLE_DISCORD=False, ENABLE_TELEGRAM=True, TELEGRAM_BOT_TOKEN="token", TELEGRAM_CHAT_ID="chat")
        notifiers = main.build_notifiers(config)

        assert [type(n) for n in notifiers] == [TelegramNotifier]

    def test_both_channels(self) -> None:
        config = dict(
            NO_CHANNEL,
            DISCORD_WEBHOOK_URL=WEBHOOK,
            ENABLE_TELEGRAM=True,
            TELEGRAM_BOT_TOKEN="token",
            TELEGRAM_CHAT_ID="chat",
        )

        assert [type(n) for n in main.build_notifiers(config)] == [DiscordNotifier, TelegramNotifier]

    def test_enabled_without_credentials(self) -> None:
        config = dict(NO_CHANNEL, ENABLE_TELEGRAM=True, TELEGRAM_BOT_TOKEN="token")

        assert main.build_notifiers(config) == []

    def test_disabled_channel_ignored(self) -> None:
        assert main.build_notifiers(dict(NO_CHANNEL, ENABLE_DISCORD=False, DISCORD_WEBHOOK_URL=WEBHOOK)) == []


class TestMain:
    def test_no_channel_exits_with_error(self, monkeypatch, caplog) -> None:
        monkeypatch.setattr(main, "load_config", lambda: dict(NO_CHANNEL))

        with patch.object(main, "FeeClaimMonitor") as monitor_cls:
            assert main.main() == 1

        monitor_cls.assert_not_called()
        assert "No notification channel configured" in caplog.text

    @patch("discord_alert.requests.post")
    def test_runs_until_stopped_and_logs_summary(self, mock_post, monkeypatch, monitor_config, caplog) -> None:
        config = dict(monitor_config, POLL_INTERVAL_SECONDS=0.01, DISCORD_WEBHOOK_URL=WEBHOOK, ENABLE_DISCORD=True)
        source = StoppingDataSource([cycle(1.0), cycle(1.0)], stop_after=2)
        built = []

        def build_monitor(cfg, data_source, notifiers):
            # constructed outside any running loop, as main() does
            monitor = FeeClaimMonitor(cfg, data_source, notifiers)
            data_source.monitor = monitor
            built.append(monitor)
            return monitor

        monkeypatch.setattr(main, "load_config", lambda: config)
        monkeypatch.setattr(main, "DataSource", lambda cfg: source)
        monkeypatch.setattr(main, "FeeClaimMonitor", build_monitor)

        with caplog.at_level(logging.INFO):
            assert main.main() == 0

        assert source.calls == 2
        assert len(built) == 1
        assert "Shutting down gracefully" in caplog.text
        assert "Tracked 1 creator/token combinations" in caplog.text
        mock_post.assert_not_called()


class TestRunMonitor:
    @pytest.mark.asyncio
    async def test_signals_stop_the_monitor(self, monitor_config, notifier) -> None:
        monitor = FeeClaimMonitor(monitor_config, FakeDataSource([]), [notifier])
        monitor.stop()
        loop = asyncio.get_running_loop()

        with patch.object(loop, "add_signal_handler") as add_handler:
            await asyncio.wait_for(main.run_monitor(monitor), timeout=1)

        installed = {call.args[0]: call.args[1] for call in add_handler.call_args_list}
        assert set(installed) == {signal.SIGINT, signal.SIGTERM}
        assert all(handler == monitor.stop for handler in installed.values())

    @pytest.mark.asyncio
    async def test_missing_signal_support_is_tolerated(self, monitor_config, notifier) -> None:
        monitor = FeeClaimMonitor(monitor_config, FakeDataSource([]), [notifier])
        monitor.stop()
        loop = asyncio.get_running_loop()

        with patch.object(loop, "add_signal_handler", side_effect=NotImplementedError):
            await asyncio.wait_for(main.run_monitor(monitor), timeout=1)

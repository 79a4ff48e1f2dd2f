# Filename: main.py

import asyncio
import logging
import signal
import sys

from config import load_config
from data_sources import DataSource
from discord_alert import DiscordNotifier
from fee_monitor import FeeClaimMonitor
from telegram_alert import TelegramNotifier

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")


def build_notifiers(config: dict) -> list:
    timeout = float(config.get("REQUEST_TIMEOUT_SECONDS", 10))
    notifiers = []

    if config.get("ENABLE_DISCORD") and config.get("DISCORD_WEBHOOK_URL"):
        notifiers.append(DiscordNotifier(
            config["DISCORD_WEBHOOK_URL"],
            timeout=timeout,
            poll_interval=float(config.get("POLL_INTERVAL_SECONDS", 5)),
        ))

    if config.get("ENABLE_TELEGRAM") and config.get("TELEGRAM_BOT_TOKEN") and config.get("TELEGRAM_CHAT_ID"):
        notifiers.append(TelegramNotifier(
            config["TELEGRAM_BOT_TOKEN"],
            config["TELEGRAM_CHAT_ID"],
            timeout=timeout,
        ))

    return notifiers


async def run_monitor(monitor: FeeClaimMonitor):
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, monitor.stop)
        except NotImplementedError:
            # Windows event loops have no signal handlers; Ctrl+C still raises KeyboardInterrupt
            pass
    await monitor.run()


def main() -> int:
    config = load_config()

    notifiers = build_notifiers(config)
    if not notifiers:
        logger.error("❌ No notification channel configured (set DISCORD_WEBHOOK_URL or the Telegram settings)")
        return 1

    monitor = FeeClaimMonitor(config, DataSource(config), notifiers)

    try:
        asyncio.run(run_monitor(monitor))
    except KeyboardInterrupt:
        logger.info("❌ Bot stopped by user.")
        logger.info(f"📊 Tracked {len(monitor.tracker)} creator/token combinations")

    return 0


if __name__ == "__main__":
    sys.exit(main())

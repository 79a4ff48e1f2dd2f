# Filename: telegram_alert.py

import logging
from datetime import datetime, timezone

import requests

from models import ClaimEvent, IdleAlert, NotifyError

logger = logging.getLogger("TelegramNotifier")


def escape_md(text: str) -> str:
    return text.replace('_', '\\_').replace('*', '\\*').replace('[', '\\[').replace('`', '\\`')


def format_claim_message(event: ClaimEvent) -> str:
    token = event.token
    creator = event.creator
    header = "🚨 *FIRST FEE CLAIM DETECTED!*" if event.is_first_claim else "💸 *Fee Claim Detected!*"

    return f"""
{header}

*Token:* {escape_md(token.symbol)} - {escape_md(token.name)}
*Creator:* {escape_md(creator.label)}
*Claim Amount:* {event.delta:.4f} SOL
*Total Claimed:* {event.new_amount:.4f} SOL
*Market Cap:* ${token.market_cap:,.0f}
*Lifetime Fees:* {token.lifetime_fees:.2f} SOL

*Contract:* `{token.address}`
🔍 [View on Solscan](https://solscan.io/token/{token.address})
    """.strip()


def format_idle_message(alert: IdleAlert) -> str:
    last_claim = datetime.fromtimestamp(alert.last_claim_at, tz=timezone.utc)
    return f"""
😴 *Everybody must be gooning...*

No claims in the past {alert.window_label}.
*Last Claim:* {last_claim.strftime('%Y-%m-%d %H:%M:%S')} UTC
*Time Since Last Claim:* {alert.minutes_since_last_claim} minutes
    """.strip()


class TelegramNotifier:
    name = "Telegram"

    def __init__(self, bot_token: str, chat_id: str, timeout: float = 10):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout

        if not self.bot_token or not self.chat_id:
            logger.error("[Telegram] Missing bot token or chat ID!")

    def send_claim_alert(self, event: ClaimEvent, sent_at: float) -> bool:
        try:
            self.send_markdown(format_claim_message(event))
        except NotifyError as e:
            logger.error(f"[Telegram] ❌ Claim alert for {event.token.symbol} not delivered: {e}")
            return False
        logger.info(f"[Telegram] ✅ Alert sent for {event.token.symbol} claim")
        return True

    def send_idle_alert(self, alert: IdleAlert) -> bool:
        try:
            self.send_markdown(format_idle_message(alert))
        except NotifyError as e:
            logger.error(f"[Telegram] ❌ Idle message not delivered: {e}")
            return False
        logger.info("[Telegram] 😴 Idle message sent")
        return True

    def send_markdown(self, text: str):
        """
        Sends a raw Markdown message. Raises NotifyError on any failure.
        """
        if not self.bot_token or not self.chat_id:
            raise NotifyError(self.name, "bot token or chat ID not configured")

        url = f"https://api.telegram.org/bot{self.bot_token}/sendMessage"
        payload = {
            "chat_id": self.chat_id,
            "text": text,
            "parse_mode": "Markdown",
            "disable_web_page_preview": True
        }

        try:
            response = requests.post(url, data=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotifyError(self.name, f"request exception: {e}")

        if response.status_code != 200:
            raise NotifyError(self.name, f"{response.status_code} - {response.text}", status=response.status_code)

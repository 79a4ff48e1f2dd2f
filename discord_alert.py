# Filename: discord_alert.py

import logging
from datetime import datetime, timezone
from typing import Dict, Any

import requests

from models import ClaimEvent, IdleAlert, NotifyError

logger = logging.getLogger("DiscordNotifier")

CLAIM_COLOR = 0xFF0000
IDLE_COLOR = 0xFFAA00
DEFAULT_THUMBNAIL = "https://bags.fun/favicon.ico"


def iso_timestamp(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def build_claim_embed(event: ClaimEvent, sent_at: float) -> Dict[str, Any]:
    token = event.token
    creator = event.creator

    if event.is_first_claim:
        title = "🚨 FIRST FEE CLAIM DETECTED!"
        description = f"**{creator.display_name or 'Creator'}** just claimed fees for the FIRST TIME!"
    else:
        title = "💸 FEE CLAIM DETECTED!"
        description = f"**{creator.display_name or 'Creator'}** just claimed fees!"

    stats = (
        f"Price: ${token.price:.8f}\n"
        f"Market Cap: ${token.market_cap:,.0f}\n"
        f"24h Volume: ${token.volume_24h:,.0f}\n"
        f"Liquidity: ${token.liquidity:,.0f}\n"
        f"Lifetime Fees: {token.lifetime_fees:.2f} SOL"
    )

    return {
        "title": title,
        "description": description,
        "color": CLAIM_COLOR,
        "fields": [
            {"name": "💎 Token", "value": f"{token.symbol} - {token.name}", "inline": False},
            {"name": "💰 Claim Amount", "value": f"**{event.delta:.4f} SOL**", "inline": True},
            {"name": "📊 Total Claimed", "value": f"{event.new_amount:.4f} SOL", "inline": True},
            {"name": "👤 Creator", "value": creator.label, "inline": True},
            {"name": "🔗 Token Contract Address", "value": f"`{token.address}`", "inline": False},
            {"name": "👤 Creator Wallet", "value": f"`{creator.wallet}`", "inline": False},
            {"name": "📈 Token Stats", "value": stats, "inline": False},
        ],
        "thumbnail": {"url": token.icon or creator.pfp or DEFAULT_THUMBNAIL},
        "footer": {"text": f"Token: {token.address[:16]}..."},
        "timestamp": iso_timestamp(sent_at),
    }


def build_idle_embed(alert: IdleAlert, poll_interval: float) -> Dict[str, Any]:
    last_claim = datetime.fromtimestamp(alert.last_claim_at, tz=timezone.utc)
    return {
        "title": "😴 Everybody must be gooning...",
        "description": f"**No claims in the past {alert.window_label}**",
        "color": IDLE_COLOR,
        "fields": [
            {"name": "⏰ Last Claim", "value": last_claim.strftime("%Y-%m-%d %H:%M:%S UTC"), "inline": False},
            {"name": "🕐 Time Since Last Claim", "value": f"{alert.minutes_since_last_claim} minutes", "inline": False},
        ],
        "footer": {"text": f"Monitoring continues every {poll_interval:g} seconds..."},
        "timestamp": iso_timestamp(alert.detected_at),
    }


class DiscordNotifier:
    name = "Discord"

    def __init__(self, webhook_url: str, timeout: float = 10, poll_interval: float = 5):
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.poll_interval = poll_interval

        if not self.webhook_url:
            logger.error("[Discord] Missing webhook URL!")

    def send_claim_alert(self, event: ClaimEvent, sent_at: float) -> bool:
        try:
            self.send_embed(build_claim_embed(event, sent_at))
        except NotifyError as e:
            logger.error(f"[Discord] ❌ Claim alert for {event.token.symbol} not delivered: {e}")
            return False
        logger.info(f"[Discord] ✅ Alert sent for {event.token.symbol} claim")
        return True

    def send_idle_alert(self, alert: IdleAlert) -> bool:
        try:
            self.send_embed(build_idle_embed(alert, self.poll_interval))
        except NotifyError as e:
            logger.error(f"[Discord] ❌ Idle message not delivered: {e}")
            return False
        logger.info(f"[Discord] 😴 Idle message sent ({alert.minutes_since_last_claim} min since last claim)")
        return True

    def send_embed(self, embed: Dict[str, Any]):
        """
        Posts a single embed to the webhook. Raises NotifyError on any failure.
        """
        if not self.webhook_url:
            raise NotifyError(self.name, "webhook URL not configured")

        try:
            response = requests.post(self.webhook_url, json={"embeds": [embed]}, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotifyError(self.name, f"request exception: {e}")

        if not 200 <= response.status_code < 300:
            raise NotifyError(self.name, f"{response.status_code} - {response.text}", status=response.status_code)

# Filename: models.py

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class CreatorRecord:
    """
    CreatorRecord is one fee-share holder of a token, as reported by bags.fm.
    `claimed` is the cumulative amount withdrawn so far, already converted to SOL.
    """
    wallet: str                          # Creator wallet address
    display_name: Optional[str] = None   # bags.fm username or Twitter handle
    royalty_bps: int = 0                 # Fee share in basis points
    claimed: float = 0.0                 # Cumulative claimed fees (SOL)
    pfp: Optional[str] = None            # Avatar URL

    @property
    def has_royalty(self) -> bool:
        return self.royalty_bps > 0

    @property
    def label(self) -> str:
        return self.display_name or f"{self.wallet[:8]}..."


@dataclass
class TokenRecord:
    """
    TokenRecord is the merged, fully-defaulted view of one token for a single poll cycle.
    Fee data comes from bags.fm, market stats from Jupiter.
    """
    address: str                         # Token mint address
    symbol: str = "Unknown"
    name: str = "Unknown"
    icon: Optional[str] = None
    price: float = 0.0                   # USD
    market_cap: float = 0.0              # USD
    volume_24h: float = 0.0              # USD, buy + sell
    liquidity: float = 0.0               # USD
    price_change_24h: float = 0.0        # percent
    lifetime_fees: float = 0.0           # SOL
    creators: List[CreatorRecord] = field(default_factory=list)

    def main_creator(self) -> Optional[CreatorRecord]:
        for creator in self.creators:
            if creator.has_royalty:
                return creator
        return self.creators[0] if self.creators else None


@dataclass
class ClaimEvent:
    token: TokenRecord
    creator: CreatorRecord
    previous_amount: float
    new_amount: float
    delta: float

    @property
    def is_first_claim(self) -> bool:
        return self.previous_amount == 0


@dataclass
class IdleAlert:
    last_claim_at: float                 # epoch seconds
    detected_at: float                   # epoch seconds
    window_seconds: float = 3600         # idle threshold that was exceeded

    @property
    def minutes_since_last_claim(self) -> int:
        return int((self.detected_at - self.last_claim_at) // 60)

    @property
    def window_label(self) -> str:
        """Idle window for display, e.g. "hour", "2 hours" or "30 minutes"."""
        seconds = int(self.window_seconds)
        for unit, size in (("hour", 3600), ("minute", 60)):
            if seconds >= size and seconds % size == 0:
                count = seconds // size
                return unit if count == 1 else f"{count} {unit}s"
        return "second" if seconds == 1 else f"{seconds} seconds"


class FetchError(Exception):
    """An upstream source answered with a non-success status, garbage JSON, or not at all."""

    def __init__(self, url: str, status: Optional[int] = None, body: str = ""):
        self.url = url
        self.status = status
        self.body = body
        super().__init__(f"{url} -> status={status} body={body[:200]}")


class NotifyError(Exception):
    """A notification could not be delivered to its channel."""

    def __init__(self, channel: str, message: str, status: Optional[int] = None):
        self.channel = channel
        self.status = status
        super().__init__(f"[{channel}] {message}")

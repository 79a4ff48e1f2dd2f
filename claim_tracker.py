# Filename: claim_tracker.py

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Any

from models import ClaimEvent, CreatorRecord, TokenRecord

logger = logging.getLogger("ClaimTracker")

TrackerKey = Tuple[str, str]  # (token address, creator wallet)


class CreatorFilter(str, Enum):
    ROYALTY = "royalty"   # only creators with a nonzero fee share
    ALL = "all"


class ClaimMode(str, Enum):
    ALL = "all"           # every increase
    FIRST = "first"       # only a creator's first-ever claim


@dataclass
class ClaimSettings:
    creator_filter: CreatorFilter = CreatorFilter.ROYALTY
    claim_mode: ClaimMode = ClaimMode.FIRST
    min_claim_sol: float = 0.0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ClaimSettings":
        return cls(
            creator_filter=CreatorFilter(str(config.get("CREATOR_FILTER", "royalty")).lower()),
            claim_mode=ClaimMode(str(config.get("CLAIM_MODE", "first")).lower()),
            min_claim_sol=float(config.get("MIN_CLAIM_SOL", 0.0)),
        )

    def includes(self, creator: CreatorRecord) -> bool:
        if self.creator_filter == CreatorFilter.ROYALTY:
            return creator.has_royalty
        return True

    def accepts(self, previous: float, delta: float) -> bool:
        if not delta > 0:
            return False
        if self.min_claim_sol > 0 and delta < self.min_claim_sol:
            return False
        if self.claim_mode == ClaimMode.FIRST and previous != 0:
            return False
        return True


def detect_claims(
    tokens: List[TokenRecord],
    amounts: Dict[TrackerKey, float],
    settings: ClaimSettings,
) -> List[ClaimEvent]:
    """
    Compares each creator's cumulative claimed amount with the last observed value
    and returns the increases that pass the filter and thresholds.

    `amounts` is updated for every creator, filtered or not, so an increase is
    never reported twice. A drop in the upstream value is logged and ignored:
    the stored amount never decreases. Creators that have never claimed get no entry.
    """
    events = []

    for token in tokens:
        for creator in token.creators:
            key = (token.address, creator.wallet)
            current = creator.claimed
            previous = amounts.get(key, 0.0)

            if not math.isfinite(current):
                logger.info(f"[CLAIM] ℹ️ Ignoring non-numeric claimed amount for {creator.label} on {token.symbol}")
                continue

            if current < previous:
                logger.info(
                    f"[CLAIM] ℹ️ Claimed amount went down for {creator.label} on {token.symbol} "
                    f"({previous:.4f} -> {current:.4f} SOL), keeping {previous:.4f}"
                )
                continue

            delta = current - previous
            if settings.includes(creator) and settings.accepts(previous, delta):
                events.append(ClaimEvent(
                    token=token,
                    creator=creator,
                    previous_amount=previous,
                    new_amount=current,
                    delta=delta,
                ))
                logger.info(
                    f"[CLAIM] 🚨 {creator.label} claimed {delta:.4f} SOL on {token.symbol} "
                    f"(total {current:.4f} SOL{', first claim' if previous == 0 else ''})"
                )

            # unseen creators with nothing claimed are equivalent to a stored 0
            if current > 0 or key in amounts:
                amounts[key] = current

    return events


class ClaimTracker:
    """Owns the (token, creator) -> claimed amount map for the lifetime of the process."""

    def __init__(self, settings: Optional[ClaimSettings] = None, amounts: Optional[Dict[TrackerKey, float]] = None):
        self.settings = settings or ClaimSettings()
        self.amounts: Dict[TrackerKey, float] = amounts if amounts is not None else {}

    def detect(self, tokens: List[TokenRecord]) -> List[ClaimEvent]:
        return detect_claims(tokens, self.amounts, self.settings)

    def get(self, token_address: str, wallet: str) -> float:
        return self.amounts.get((token_address, wallet), 0.0)

    def __len__(self) -> int:
        return len(self.amounts)

# Filename: token_merger.py

import logging
import math
from typing import Dict, List, Optional, Any, Iterable

from models import CreatorRecord, TokenRecord

logger = logging.getLogger("TokenMerger")

# bags.fm reports fee and claim amounts in lamports
LAMPORTS_PER_SOL = 1_000_000_000


def safe_float(value: Any, default: float = 0.0) -> float:
    try:
        if value is None:
            return default
        number = float(value)
    except (TypeError, ValueError):
        return default
    # "NaN" and "inf" parse as floats but are not amounts
    return number if math.isfinite(number) else default


def as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def lamports_to_sol(value: Any) -> float:
    return safe_float(value) / LAMPORTS_PER_SOL


def normalize_creator(raw: Dict[str, Any]) -> Optional[CreatorRecord]:
    wallet = raw.get("wallet")
    if not wallet or not isinstance(wallet, str):
        return None

    return CreatorRecord(
        wallet=wallet,
        display_name=raw.get("username") or raw.get("twitterUsername") or None,
        royalty_bps=int(safe_float(raw.get("royaltyBps"))),
        claimed=lamports_to_sol(raw.get("totalClaimed")),
        pfp=raw.get("pfp"),
    )


def normalize_token(raw: Dict[str, Any], trading: Optional[Dict[str, Any]] = None) -> TokenRecord:
    """
    Builds a TokenRecord from one bags.fm leaderboard entry, using the matching
    Jupiter asset (if any) for market stats. Every missing field resolves to its default.
    """
    trading = as_dict(trading)
    info = as_dict(raw.get("tokenInfo"))
    stats = as_dict(trading.get("stats24h"))
    raw_creators = raw.get("creators")

    creators = []
    for raw_creator in raw_creators if isinstance(raw_creators, list) else []:
        if not isinstance(raw_creator, dict):
            continue
        creator = normalize_creator(raw_creator)
        if creator:
            creators.append(creator)

    volume = 0.0
    if stats:
        volume = safe_float(stats.get("buyVolume")) + safe_float(stats.get("sellVolume"))

    return TokenRecord(
        address=raw["token"],
        symbol=trading.get("symbol") or info.get("symbol") or raw.get("symbol") or "Unknown",
        name=trading.get("name") or info.get("name") or raw.get("name") or "Unknown",
        icon=trading.get("icon") or info.get("icon") or raw.get("image"),
        price=safe_float(trading.get("usdPrice")),
        market_cap=safe_float(trading.get("mcap")),
        volume_24h=volume,
        liquidity=safe_float(trading.get("liquidity")),
        price_change_24h=safe_float(stats.get("priceChange")),
        lifetime_fees=lamports_to_sol(raw.get("lifetimeFees")),
        creators=creators,
    )


def merge_token_data(
    fee_stats: List[Dict[str, Any]],
    trading_stats: List[Dict[str, Any]],
    targets: Optional[Iterable[str]] = None,
) -> List[TokenRecord]:
    """
    Joins the bags.fm fee leaderboard with Jupiter trading stats by mint address.

    Args:
        fee_stats: primary dataset; defines which tokens exist this cycle
        trading_stats: optional enrichment, keyed by Jupiter's `id`
        targets: restrict the output to these mints (None or empty = all)

    Returns:
        One TokenRecord per retained fee_stats entry
    """
    wanted = set(targets or [])
    trading_by_id = {a["id"]: a for a in trading_stats if isinstance(a, dict) and isinstance(a.get("id"), str)}

    tokens = []
    for raw in fee_stats:
        if not isinstance(raw, dict):
            continue
        address = raw.get("token")
        if not address or not isinstance(address, str):
            continue
        if wanted and address not in wanted:
            continue
        tokens.append(normalize_token(raw, trading_by_id.get(address)))

    if wanted:
        missing = wanted - {t.address for t in tokens}
        for address in sorted(missing):
            logger.info(f"[MERGE] ⚠️ {address} not in the fee leaderboard yet, creator data unavailable")

    return tokens


def describe_token(token: TokenRecord) -> str:
    lines = [
        f"🎯 MONITORING: {token.symbol} - {token.name}",
        f"   Contract: {token.address}",
        f"   Price: ${token.price:.8f}",
        f"   Market Cap: ${token.market_cap:,.0f}",
        f"   Lifetime Fees: {token.lifetime_fees:.4f} SOL",
    ]

    creator = token.main_creator()
    if creator:
        claimed = f"✅ {creator.claimed:.4f} SOL" if creator.claimed > 0 else "⏳ Not yet claimed"
        lines.append(f"   Creator: {creator.display_name or 'N/A'}")
        lines.append(f"   Claimed: {claimed}")
    else:
        lines.append("   ⚠️ No creator data")

    return "\n".join(lines)

"""
BagsClaimBot - Test Fixtures

Shared builders and fakes for all test modules.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import pytest

from models import CreatorRecord, FetchError, TokenRecord

MINT = "Gc8VdRoCtset6SFErLKBcV5e4Ew8XwnTDYbtYXFTBAGS"
WALLET = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
OTHER_WALLET = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"


def lamports(sol: float) -> str:
    return str(int(round(sol * 1_000_000_000)))


def raw_creator(wallet: str = WALLET, claimed_sol: float = 0.0, royalty_bps: int = 10000, **extra) -> Dict[str, Any]:
    creator = {
        "wallet": wallet,
        "username": "dev",
        "royaltyBps": royalty_bps,
        "totalClaimed": lamports(claimed_sol),
    }
    creator.update(extra)
    return creator


def raw_fee_entry(token: str = MINT, creators: Optional[List[Dict[str, Any]]] = None, lifetime_sol: float = 10.0) -> Dict[str, Any]:
    return {
        "token": token,
        "lifetimeFees": lamports(lifetime_sol),
        "creators": creators if creators is not None else [raw_creator()],
    }


def make_token(
    claimed: float = 0.0,
    royalty_bps: int = 10000,
    address: str = MINT,
    wallet: str = WALLET,
) -> TokenRecord:
    return TokenRecord(
        address=address,
        symbol="BAGS",
        name="Bags Token",
        creators=[CreatorRecord(wallet=wallet, display_name="dev", royalty_bps=royalty_bps, claimed=claimed)],
    )


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeNotifier:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.claims = []
        self.idles = []

    def send_claim_alert(self, event, sent_at) -> bool:
        self.claims.append(event)
        return not self.fail

    def send_idle_alert(self, alert) -> bool:
        self.idles.append(alert)
        return not self.fail


class FakeDataSource:
    """Replays a scripted list of (fee_stats, trading_stats) tuples or exceptions."""

    def __init__(self, script: Optional[list] = None):
        self.script = list(script or [])
        self.calls = 0

    def push(self, item):
        self.script.append(item)

    async def fetch_all(self, session=None):
        self.calls += 1
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


class StoppingDataSource(FakeDataSource):
    """Stops the monitor after a fixed number of fetches and records overlap."""

    def __init__(self, script, stop_after: int):
        super().__init__(script)
        self.stop_after = stop_after
        self.monitor = None
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_all(self, session=None):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0.02)
            if self.calls + 1 >= self.stop_after:
                self.monitor.stop()
            return await super().fetch_all(session)
        finally:
            self.in_flight -= 1


def fetch_error() -> FetchError:
    return FetchError("https://api2.bags.fm/api/v1/token-launch/top-tokens/lifetime-fees", 503, "upstream down")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def monitor_config() -> Dict[str, Any]:
    return {
        "POLL_INTERVAL_SECONDS": 5,
        "IDLE_ALERT_THRESHOLD_SECONDS": 3600,
        "ENABLE_IDLE_ALERTS": True,
        "ALERT_DELAY_SECONDS": 0,
        "TARGET_TOKENS": MINT,
        "CREATOR_FILTER": "all",
        "CLAIM_MODE": "all",
        "MIN_CLAIM_SOL": 0.0,
    }

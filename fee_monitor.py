# fee_monitor.py

import asyncio
import time
import logging
from typing import Dict, List, Optional, Any, Callable

from alert_policy import Alert, AlertPolicy
from claim_tracker import ClaimSettings, ClaimTracker
from config import get_target_tokens
from data_sources import DataSource
from models import ClaimEvent, FetchError
from token_merger import describe_token, merge_token_data

logger = logging.getLogger("FeeMonitor")


class FeeClaimMonitor:
    def __init__(
        self,
        config: Dict[str, Any],
        data_source: DataSource,
        notifiers: List[Any],
        tracker: Optional[ClaimTracker] = None,
        policy: Optional[AlertPolicy] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.data_source = data_source
        self.notifiers = notifiers
        self.clock = clock
        self.targets = get_target_tokens(config)
        self.poll_interval = float(config.get("POLL_INTERVAL_SECONDS", 5))
        self.alert_delay = float(config.get("ALERT_DELAY_SECONDS", 1.0))
        self.tracker = tracker or ClaimTracker(ClaimSettings.from_config(config))
        self.policy = policy or AlertPolicy(
            idle_threshold=float(config.get("IDLE_ALERT_THRESHOLD_SECONDS", 3600)),
            started_at=self.clock(),
            idle_alerts_enabled=bool(config.get("ENABLE_IDLE_ALERTS", True)),
        )
        self._stopping = False
        # created inside run() so it binds to the loop that awaits it
        self._stop_event: Optional[asyncio.Event] = None

    async def run_cycle(self) -> List[Alert]:
        """
        One fetch -> merge -> detect -> decide -> notify pass.
        A fetch failure ends the cycle before any state is touched.
        """
        try:
            fee_stats, trading_stats = await self.data_source.fetch_all()
        except FetchError as e:
            logger.error(f"[FETCH] ❌ Cycle aborted: {e}")
            return []

        tokens = merge_token_data(fee_stats, trading_stats, self.targets)
        if not tokens:
            logger.warning("[FeeMonitor] ⚠️ No monitored tokens in this cycle, skipping")
            return []

        for token in tokens:
            if self.targets:
                logger.info("\n" + describe_token(token))
            else:
                logger.debug("\n" + describe_token(token))

        events = self.tracker.detect(tokens)
        now = self.clock()
        alerts = self.policy.evaluate(events, now)

        if alerts:
            await self.dispatch(alerts, now)
        elif events:
            logger.info(f"[FeeMonitor] {len(events)} change(s) recorded without alerting")
        else:
            logger.info("[FeeMonitor] ℹ️ No new claims (still monitoring...)")

        return alerts

    async def dispatch(self, alerts: List[Alert], now: float):
        for index, alert in enumerate(alerts):
            for notifier in self.notifiers:
                # notifiers block on requests; keep the loop free for signals
                if isinstance(alert, ClaimEvent):
                    await asyncio.to_thread(notifier.send_claim_alert, alert, now)
                else:
                    await asyncio.to_thread(notifier.send_idle_alert, alert)

            if isinstance(alert, ClaimEvent) and index < len(alerts) - 1 and self.alert_delay > 0:
                await asyncio.sleep(self.alert_delay)

    async def run(self):
        logger.info("🚀 Starting Bags.fm Fee Claim Monitor...")
        logger.info(f"🎯 Monitoring: {', '.join(self.targets) or 'all tokens'}")
        logger.info(f"⏱️ Check interval: {self.poll_interval:g} seconds")

        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        if self._stopping:
            self._stop_event.set()

        while not self._stop_event.is_set():
            started = loop.time()
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(f"[FeeMonitor] ❌ Monitoring cycle failed: {e}")

            elapsed = loop.time() - started
            if elapsed > self.poll_interval:
                logger.warning(f"[FeeMonitor] Cycle took {elapsed:.1f}s, longer than the {self.poll_interval:g}s interval")

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=max(0.0, self.poll_interval - elapsed))
            except asyncio.TimeoutError:
                pass

        logger.info(f"📊 Tracked {len(self.tracker)} creator/token combinations")

    def stop(self):
        if not self._stopping:
            logger.info("👋 Shutting down gracefully...")
        self._stopping = True
        if self._stop_event is not None:
            self._stop_event.set()

# Filename: alert_policy.py

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from models import ClaimEvent, IdleAlert

logger = logging.getLogger("AlertPolicy")

Alert = Union[ClaimEvent, IdleAlert]


class MonitorPhase(str, Enum):
    BASELINE = "baseline"
    ACTIVE = "active"


@dataclass
class MonitorState:
    last_claim_at: float
    last_idle_alert_at: float = 0.0
    first_run: bool = True

    @property
    def phase(self) -> MonitorPhase:
        return MonitorPhase.BASELINE if self.first_run else MonitorPhase.ACTIVE


class AlertPolicy:
    """
    Decides what gets sent after each cycle.

    The first cycle only seeds the tracker and never alerts. Afterwards every claim
    event is forwarded, and when a cycle finds nothing an idle alert is produced
    once the last claim and the last idle alert are both older than the threshold.
    """

    def __init__(self, idle_threshold: float, started_at: float, idle_alerts_enabled: bool = True):
        self.idle_threshold = idle_threshold
        self.idle_alerts_enabled = idle_alerts_enabled
        self.state = MonitorState(last_claim_at=started_at)

    @property
    def phase(self) -> MonitorPhase:
        return self.state.phase

    def evaluate(self, events: List[ClaimEvent], now: float) -> List[Alert]:
        if self.state.first_run:
            self.state.first_run = False
            logger.info(f"[POLICY] 📝 Baseline established ({len(events)} pending changes absorbed)")
            return []

        if events:
            self.state.last_claim_at = now
            return list(events)

        if self.should_send_idle(now):
            self.state.last_idle_alert_at = now
            return [IdleAlert(last_claim_at=self.state.last_claim_at, detected_at=now, window_seconds=self.idle_threshold)]

        return []

    def should_send_idle(self, now: float) -> bool:
        if not self.idle_alerts_enabled:
            return False
        since_claim = now - self.state.last_claim_at
        since_idle = now - self.state.last_idle_alert_at
        return since_claim > self.idle_threshold and since_idle > self.idle_threshold

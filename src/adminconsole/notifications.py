"""Transient, auto-expiring feedback messages."""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from prometheus_client import Counter

from .config import settings

logger = logging.getLogger(__name__)

NOTIFICATION_COUNTER = Counter(
    "adminconsole_notifications_total",
    "Total notifications pushed to the operator",
    ["severity"],
)


class Severity(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    severity: Severity
    ttl: float
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class NotificationCenter:
    """One visible slot per severity, each cleared by its own timer.

    Pushing into an occupied slot replaces the message and restarts the
    timer; the two severities never affect each other. Timers are scheduled
    on the running event loop with ``call_later`` and the previous handle is
    cancelled before a new one is stored, so an old timer can never clear a
    newer message. Outside a running loop messages stay until replaced or
    cleared explicitly.
    """

    def __init__(
        self, success_ttl: Optional[float] = None, error_ttl: Optional[float] = None
    ) -> None:
        self._ttl: Dict[Severity, float] = {
            Severity.SUCCESS: settings.success_ttl if success_ttl is None else success_ttl,
            Severity.ERROR: settings.error_ttl if error_ttl is None else error_ttl,
        }
        self._slots: Dict[Severity, Optional[Notification]] = {s: None for s in Severity}
        self._timers: Dict[Severity, asyncio.TimerHandle] = {}

    def push(self, message: str, severity: Severity | str = Severity.SUCCESS) -> Notification:
        severity = Severity(severity)
        notification = Notification(message=message, severity=severity, ttl=self._ttl[severity])
        self._slots[severity] = notification
        self._restart_timer(severity, notification)
        NOTIFICATION_COUNTER.labels(severity=severity.value).inc()
        logger.info("notification %s: %s", severity.value, message)
        return notification

    def success(self, message: str) -> Notification:
        return self.push(message, Severity.SUCCESS)

    def error(self, message: str) -> Notification:
        return self.push(message, Severity.ERROR)

    def current(self, severity: Severity | str) -> Optional[Notification]:
        return self._slots[Severity(severity)]

    @property
    def message(self) -> str:
        """Text of the visible success notification, or empty."""
        slot = self._slots[Severity.SUCCESS]
        return slot.message if slot else ""

    @property
    def error_message(self) -> str:
        slot = self._slots[Severity.ERROR]
        return slot.message if slot else ""

    def snapshot(self) -> Dict[Severity, Optional[Notification]]:
        return dict(self._slots)

    def clear(self, severity: Severity | str | None = None) -> None:
        targets = list(Severity) if severity is None else [Severity(severity)]
        for target in targets:
            self._cancel_timer(target)
            self._slots[target] = None

    def close(self) -> None:
        """Cancel pending timers, leaving visible messages untouched."""
        for severity in list(self._timers):
            self._cancel_timer(severity)

    def _restart_timer(self, severity: Severity, notification: Notification) -> None:
        self._cancel_timer(severity)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("no running loop, %s notification will not expire", severity.value)
            return
        self._timers[severity] = loop.call_later(
            notification.ttl, self._expire, severity, notification
        )

    def _cancel_timer(self, severity: Severity) -> None:
        timer = self._timers.pop(severity, None)
        if timer is not None:
            timer.cancel()

    def _expire(self, severity: Severity, notification: Notification) -> None:
        self._timers.pop(severity, None)
        if self._slots[severity] is notification:
            self._slots[severity] = None

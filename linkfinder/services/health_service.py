"""Health monitoring for the link store runtime.

`HealthMonitor` owns its state: every `check()` pings the data store and the
local disk, updates the consecutive failure counter and returns a fresh
`HealthState` snapshot. After three consecutive failed checks it logs an
alert at ERROR level (once per failure streak). The refresh cadence is set by
whoever calls `check()` (the scheduled health_check Lambda).
"""

import shutil
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Any, Optional

from linkfinder.constants import APPLICATION_NAME, APPLICATION_VERSION, Defaults


logger = logging.getLogger(__name__)

HEALTH_CHECK_FAILED = 'HEALTH_CHECK_FAILED'
HEALTH_ALERT = 'HEALTH_ALERT'
HEALTH_RECOVERED = 'HEALTH_RECOVERED'


@dataclass(frozen=True)
class HealthState:
    status: str
    datastore_up: bool
    disk_used_percent: Optional[float]
    consecutive_failures: int
    checked_at: Optional[datetime]
    problems: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            'status': self.status,
            'application': APPLICATION_NAME,
            'version': APPLICATION_VERSION,
            'datastore': 'UP' if self.datastore_up else 'DOWN',
            'diskUsedPercent': self.disk_used_percent,
            'consecutiveFailures': self.consecutive_failures,
            'checkedAt': self.checked_at.isoformat() if self.checked_at else None,
            'problems': list(self.problems),
        }


class HealthMonitor:
    """Track data store reachability and disk usage across checks.

    Args:
        datastore_ping (Callable[[], bool]):
            Returns True when the data store answers.
        disk_path (str):
            Filesystem path whose usage is monitored.
        disk_threshold_percent (float):
            Usage above this percentage counts as a failure.
        alert_after (int):
            Number of consecutive failed checks that raises an alert.
        disk_usage (Callable):
            `shutil.disk_usage` compatible function.
    """

    def __init__(
        self,
        datastore_ping: Callable[[], bool],
        disk_path: str = '/tmp',  # noqa: S108
        disk_threshold_percent: float = Defaults.HEALTH_DISK_THRESHOLD_PERCENT,
        alert_after: int = Defaults.HEALTH_ALERT_AFTER_FAILURES,
        disk_usage: Callable = shutil.disk_usage,
    ):
        self.datastore_ping = datastore_ping
        self.disk_path = disk_path
        self.disk_threshold_percent = disk_threshold_percent
        self.alert_after = alert_after
        self.disk_usage = disk_usage
        self._state = HealthState(
            status='UNKNOWN',
            datastore_up=False,
            disk_used_percent=None,
            consecutive_failures=0,
            checked_at=None,
        )

    @property
    def state(self) -> HealthState:
        return self._state

    def _disk_used_percent(self) -> Optional[float]:
        try:
            usage = self.disk_usage(self.disk_path)
        except OSError:
            logger.warning('Could not read disk usage.', extra={'path': self.disk_path}, exc_info=True)
            return None
        return round(usage.used / usage.total * 100, 2) if usage.total else None

    def check(self) -> HealthState:
        problems = []

        datastore_up = bool(self.datastore_ping())
        if not datastore_up:
            problems.append('Data store is unreachable')

        disk_used = self._disk_used_percent()
        if disk_used is None:
            problems.append('Disk usage is unavailable')
        elif disk_used > self.disk_threshold_percent:
            problems.append(f'Disk usage {disk_used}% exceeds {self.disk_threshold_percent}%')

        previous_failures = self._state.consecutive_failures
        failures = previous_failures + 1 if problems else 0
        self._state = HealthState(
            status='DOWN' if problems else 'UP',
            datastore_up=datastore_up,
            disk_used_percent=disk_used,
            consecutive_failures=failures,
            checked_at=datetime.now(UTC),
            problems=tuple(problems),
        )

        if problems:
            logger.warning('Health check failed.', extra={'event': HEALTH_CHECK_FAILED, 'problems': problems, 'consecutiveFailures': failures})
        if failures == self.alert_after:
            logger.error(
                'Health check failed %s times in a row.',
                failures,
                extra={'event': HEALTH_ALERT, 'problems': problems, 'consecutiveFailures': failures},
            )
        if not problems and previous_failures >= self.alert_after:
            logger.info('Health recovered.', extra={'event': HEALTH_RECOVERED})

        return self._state

"""
Progress reporting for long-running flatten jobs
"""

import time
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


class ProgressReporter:
    """
    Log processed-document progress against an expected total.

    Purely observational: the pipeline calls ``advance()`` after each
    document and ``finish()`` at the end.
    """

    def __init__(
        self,
        total: int,
        log_interval: int = 10_000,
        clock: Callable[[], float] = time.monotonic
    ):
        self.total = total
        self.log_interval = max(log_interval, 1)
        self.position = 0
        self._clock = clock
        self._started_at = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._started_at

    @property
    def rate(self) -> float:
        """Documents per second since the reporter was created"""
        elapsed = self.elapsed
        return self.position / elapsed if elapsed > 0 else 0.0

    @property
    def percent(self) -> Optional[float]:
        if self.total <= 0:
            return None
        return min(100.0, 100.0 * self.position / self.total)

    @property
    def eta_seconds(self) -> Optional[float]:
        rate = self.rate
        if self.total <= 0 or rate <= 0:
            return None
        return max(self.total - self.position, 0) / rate

    def advance(self, count: int = 1):
        self.position += count
        if self.position % self.log_interval == 0:
            logger.info(self.format_status())

    def format_status(self) -> str:
        status = f"Progress: {self.position}/{self.total} documents"
        percent = self.percent
        if percent is not None:
            status += f" ({percent:.1f}%)"
        status += f" | {self.rate:.0f} docs/s"
        eta = self.eta_seconds
        if eta is not None:
            status += f" | ETA {eta:.0f}s"
        return status

    def finish(self, message: str = "Processing complete"):
        logger.info(f"{message}: {self.position} documents in {self.elapsed:.1f}s")

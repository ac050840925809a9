"""
Rate Limiter - Call Spacing and Budget Floor

Keeps the downloader under two ceilings: no more than two calls per second,
and a pause whenever the shop's REST bucket is nearly drained.
"""

import math
import time
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)

# The cycle, no more than 2 calls per second
CYCLE = 0.5

# Pause when this many calls or fewer are left in the bucket
BUDGET_FLOOR = 5

# Seconds to let the bucket refill
BUDGET_PAUSE = 10


class RateLimiter:
    """Gates each API call on the elapsed cycle and the remaining call budget"""

    def __init__(
        self,
        calls_left: Callable[[], Optional[int]],
        verbose: bool = False,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            calls_left: Accessor for the remaining call budget, None when unknown
            verbose: Log every sleep at INFO
            clock: Monotonic clock in seconds
            sleep: Blocking sleep
        """
        self.calls_left = calls_left
        self.verbose = verbose
        self.clock = clock
        self.sleep = sleep
        self.last_call_timestamp = clock()

    def mark(self) -> None:
        """Record that a call was just made"""
        self.last_call_timestamp = self.clock()

    def wait_time(self) -> int:
        """Seconds to wait before the next call, without sleeping"""
        elapsed = self.clock() - self.last_call_timestamp
        wait = math.ceil(CYCLE - elapsed)

        if wait > 0:
            return wait

        remaining = self.calls_left()
        if remaining is not None and remaining <= BUDGET_FLOOR:
            return BUDGET_PAUSE

        return 0

    def check_cycle(self) -> int:
        """
        Sleep if the next call would break either limit

        Spacing wins over the budget floor; the two never add up.

        Returns:
            int: Seconds slept
        """
        wait = self.wait_time()

        if wait > 0:
            message = f"Cycle limit hit, sleeping for {wait} seconds..."
            if self.verbose:
                logger.info(message)
            else:
                logger.debug(message)
            self.sleep(wait)

        self.mark()
        return wait

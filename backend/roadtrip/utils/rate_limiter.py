# backend/roadtrip/utils/rate_limiter.py

import asyncio
import time
from typing import Callable, Dict, Optional

from roadtrip.core.config_loader import settings
from roadtrip.core.logger import logger


class RateLimiter:
    """
    Minimum delay between two calls to the same provider.

    ``reserve()`` books the next free slot without suspending, then
    ``wait()`` sleeps until that slot. Concurrent callers therefore get
    successive slots and no lock is held while sleeping.
    """

    def __init__(
        self,
        name: str,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.min_interval = max(0.0, min_interval)
        self._clock = clock
        self._next_slot: Optional[float] = None

    def reserve(self) -> float:
        """Book the next slot and return how long the caller must wait."""
        now = self._clock()
        slot = now if self._next_slot is None else max(now, self._next_slot)
        self._next_slot = slot + self.min_interval
        return slot - now

    async def wait(self) -> None:
        delay = self.reserve()
        if delay > 0:
            logger.debug(f"Rate limiting {self.name}: waiting {delay:.2f}s")
            await asyncio.sleep(delay)


def default_rate_limiters() -> Dict[str, RateLimiter]:
    """One fresh limiter per external service, using configured intervals."""
    return {
        "overpass": RateLimiter("overpass", settings.overpass_min_interval),
        "wikipedia": RateLimiter("wikipedia", settings.wikipedia_min_interval),
        "nominatim": RateLimiter("nominatim", settings.nominatim_min_interval),
    }

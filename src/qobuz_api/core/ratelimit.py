import asyncio
import time


class AsyncRateLimiter:
    """Token bucket shared by every request of one API client.

    Allows up to `rate` requests per `per` seconds; callers beyond that wait
    for the bucket to refill.
    """

    def __init__(self, rate: int, per: float = 1.0) -> None:
        self.rate = max(1, int(rate))
        self.per = float(per)
        self._tokens = float(self.rate)
        self._updated = time.monotonic()
        self._lock = asyncio.Lock()

    def _refill(self) -> None:
        now = time.monotonic()
        self._tokens = min(
            float(self.rate), self._tokens + (now - self._updated) * (self.rate / self.per)
        )
        self._updated = now

    async def acquire(self) -> None:
        async with self._lock:
            self._refill()
            while self._tokens < 1:
                await asyncio.sleep((1 - self._tokens) * (self.per / self.rate))
                self._refill()
            self._tokens -= 1

"""
Rate Limiting

Per-client token buckets guarding public endpoints with side effects
(resending certificate e-mails).

Clients are keyed by the socket peer address. ``X-Forwarded-For`` is only
honoured when the service runs behind a trusted proxy, otherwise any
caller could pick its own key. The bucket map is bounded: once it passes
``max_clients`` the buckets that have refilled completely are dropped,
since a full bucket behaves exactly like a fresh one.
"""

import math
import time
from dataclasses import dataclass, field
from typing import Callable, Dict

from fastapi import HTTPException, Request, status


Clock = Callable[[], float]


# ============== Token Bucket ==============

@dataclass
class TokenBucket:
    """Bucket of ``capacity`` tokens refilled at ``refill_rate`` per second."""
    capacity: int
    refill_rate: float
    clock: Clock = time.monotonic
    tokens: float = field(default=0, init=False)
    updated_at: float = field(default=0, init=False)

    def __post_init__(self):
        self.tokens = float(self.capacity)
        self.updated_at = self.clock()

    def _refill(self) -> None:
        now = self.clock()
        self.tokens = min(self.capacity, self.tokens + (now - self.updated_at) * self.refill_rate)
        self.updated_at = now

    def consume(self, tokens: int = 1) -> bool:
        """Take ``tokens`` if available. Returns False when the bucket is short."""
        self._refill()
        if self.tokens < tokens:
            return False
        self.tokens -= tokens
        return True

    def is_full(self) -> bool:
        self._refill()
        return self.tokens >= self.capacity

    def seconds_until_available(self, tokens: int = 1) -> int:
        """Whole seconds until ``tokens`` can be consumed (at least 1)."""
        if self.refill_rate <= 0:
            return 60
        missing = max(0.0, tokens - self.tokens)
        return max(1, math.ceil(round(missing / self.refill_rate, 6)))


# ============== Rate Limiter ==============

class RateLimiter:
    """
    Callable FastAPI dependency limiting requests per client.

        limiter = RateLimiter(requests_per_minute=5, burst_capacity=2)

        @router.post("/resend", dependencies=[Depends(limiter)])
        async def resend(...):
            ...
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        burst_capacity: int = 10,
        trust_forwarded_for: bool = False,
        max_clients: int = 10000,
        clock: Clock = time.monotonic,
    ):
        """
        Args:
            requests_per_minute: Sustained refill rate.
            burst_capacity: Bucket size.
            trust_forwarded_for: Key clients by the first X-Forwarded-For hop.
            max_clients: Bucket count that triggers pruning.
            clock: Monotonic time source in seconds.
        """
        self.refill_rate = requests_per_minute / 60.0
        self.burst_capacity = burst_capacity
        self.trust_forwarded_for = trust_forwarded_for
        self.max_clients = max_clients
        self._clock = clock
        self._buckets: Dict[str, TokenBucket] = {}

    def client_key(self, request: Request) -> str:
        if self.trust_forwarded_for:
            forwarded = request.headers.get("X-Forwarded-For")
            if forwarded:
                return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _bucket(self, key: str) -> TokenBucket:
        bucket = self._buckets.get(key)
        if bucket is None:
            if len(self._buckets) >= self.max_clients:
                self.prune()
            bucket = TokenBucket(self.burst_capacity, self.refill_rate, clock=self._clock)
            self._buckets[key] = bucket
        return bucket

    def prune(self) -> int:
        """Drop buckets that have refilled completely. Returns how many went."""
        idle = [key for key, bucket in self._buckets.items() if bucket.is_full()]
        for key in idle:
            del self._buckets[key]
        return len(idle)

    def check(self, request: Request) -> None:
        """
        Consume one token for the request's client.

        Raises:
            HTTPException: 429 with Retry-After when the bucket is empty.
        """
        bucket = self._bucket(self.client_key(request))
        if not bucket.consume():
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Rate limit exceeded. Please try again later.",
                headers={"Retry-After": str(bucket.seconds_until_available())},
            )

    async def __call__(self, request: Request) -> None:
        self.check(request)

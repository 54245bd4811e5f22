# pwv_gateway/middleware/concurrency_limit.py
"""
Admission control
Caps the number of requests in flight; requests over the ceiling wait for a slot.
"""

import asyncio

from starlette.types import ASGIApp, Receive, Scope, Send

from pwv_gateway.core.constants import DEFAULT_MAX_CONCURRENT_REQUESTS
from pwv_gateway.core.logging import get_logger

logger = get_logger(__name__)


class ConcurrencyLimitMiddleware:
    """Global ceiling on concurrently handled HTTP requests"""
    
    def __init__(self, app: ASGIApp, max_allowed: int = DEFAULT_MAX_CONCURRENT_REQUESTS):
        if max_allowed < 1:
            raise ValueError("max_allowed must be at least 1")
        self.app = app
        self.max_allowed = max_allowed
        self._slots = asyncio.Semaphore(max_allowed)
        self._in_flight = 0
    
    @property
    def in_flight(self) -> int:
        return self._in_flight
    
    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        
        if self._slots.locked():
            logger.debug(f"Concurrency ceiling of {self.max_allowed} reached, request queued")
        
        async with self._slots:
            self._in_flight += 1
            try:
                await self.app(scope, receive, send)
            finally:
                self._in_flight -= 1

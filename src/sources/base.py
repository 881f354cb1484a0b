"""Common contract for metadata sources.

Every provider subclasses MetadataSource and implements ``fetch``. Callers use
``lookup``, which never raises: timeouts, transport errors, bad status codes
and malformed payloads all come back as None ("no data").
"""

import asyncio
from abc import ABC, abstractmethod

from loguru import logger

from src.models.metadata import PartialMetadata
from src.sources.rate_limiter import RateLimiter

DEFAULT_TIMEOUT_SEC = 8.0


class MetadataSource(ABC):
    """One external provider of token metadata."""

    name: str = "source"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SEC,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        self._timeout = timeout
        self._rate_limiter = rate_limiter

    @abstractmethod
    async def fetch(self, mint: str) -> PartialMetadata | None:
        """Query the provider. May raise; ``lookup`` is the safe entry point."""

    async def lookup(self, mint: str) -> PartialMetadata | None:
        # Pacing wait is not counted against the request timeout
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()
        try:
            return await asyncio.wait_for(self.fetch(mint), timeout=self._timeout)
        except TimeoutError:
            logger.debug(f"[{self.name.upper()}] Timed out after {self._timeout}s for {mint[:12]}")
            return None
        except Exception as e:
            logger.debug(f"[{self.name.upper()}] No data for {mint[:12]}: {type(e).__name__}: {e}")
            return None

    async def close(self) -> None:
        """Release network resources. Sources without a client need not override."""

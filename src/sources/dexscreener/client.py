"""DexScreener market data source: price, liquidity, 24h volume, market cap.

Public API, no auth. The deepest-liquidity pair where the mint is the base
token wins; any pair is used if none lists it as base.
"""

from decimal import Decimal, InvalidOperation

import httpx
from loguru import logger

from src.models.metadata import PartialMetadata
from src.scanner.exceptions import MetadataUnavailableError
from src.sources.base import DEFAULT_TIMEOUT_SEC, MetadataSource
from src.sources.dexscreener.models import DexScreenerPair
from src.sources.rate_limiter import RateLimiter

BASE_URL = "https://api.dexscreener.com"


class DexScreenerSource(MetadataSource):
    """Async REST client for DexScreener public API (no auth required)."""

    name = "dexscreener"

    def __init__(
        self,
        max_rps: float = 4.0,
        http: httpx.AsyncClient | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        super().__init__(timeout=timeout, rate_limiter=rate_limiter or RateLimiter(max_rps))
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, mint: str) -> PartialMetadata | None:
        pairs = await self.get_token_pairs(mint)
        pair = _pick_pair(pairs, mint)
        if pair is None:
            return None
        return _pair_to_metadata(pair)

    async def get_token_pairs(self, token_address: str) -> list[DexScreenerPair]:
        """Get all pairs for a token on Solana."""
        response = await self._client.get(f"/token-pairs/v1/solana/{token_address}")

        if response.status_code == 429:
            logger.debug("[DEXSCREENER] 429 rate limited")
            return []
        if response.status_code != 200:
            raise MetadataUnavailableError(f"HTTP {response.status_code}")

        data = response.json()
        if isinstance(data, list):
            return [DexScreenerPair.model_validate(p) for p in data]
        if not isinstance(data, dict):
            raise MetadataUnavailableError("unexpected payload")
        pairs = data.get("pairs", data.get("pair", []))
        if not isinstance(pairs, list):
            pairs = [pairs] if pairs else []
        return [DexScreenerPair.model_validate(p) for p in pairs]


def _pick_pair(pairs: list[DexScreenerPair], mint: str) -> DexScreenerPair | None:
    if not pairs:
        return None
    as_base = [p for p in pairs if p.baseToken and p.baseToken.address == mint]
    return max(as_base or pairs, key=lambda p: p.liquidity_usd)


def _pair_to_metadata(pair: DexScreenerPair) -> PartialMetadata:
    market_cap = pair.marketCap if pair.marketCap is not None else pair.fdv
    return PartialMetadata(
        price=_to_float(pair.priceUsd),
        price_change_24h=_to_float(pair.priceChange.h24 if pair.priceChange else None),
        volume_24h=_to_float(pair.volume.h24 if pair.volume else None),
        liquidity=_to_float(pair.liquidity.usd if pair.liquidity else None),
        market_cap=_to_float(market_cap),
        dexscreener_url=pair.url,
    )


def _to_float(value: str | Decimal | None) -> float | None:
    if value is None:
        return None
    try:
        return float(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None

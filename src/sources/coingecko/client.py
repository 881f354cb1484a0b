"""CoinGecko market data source: price, market cap, 24h volume and change.

Uses /simple/token_price/solana. Works keyless; a demo API key raises the
limit and is sent as x-cg-demo-api-key.
"""

import httpx
from loguru import logger

from src.models.metadata import PartialMetadata
from src.scanner.exceptions import MetadataUnavailableError
from src.sources.base import DEFAULT_TIMEOUT_SEC, MetadataSource
from src.sources.coingecko.models import CoinGeckoTokenPrice
from src.sources.rate_limiter import RateLimiter

BASE_URL = "https://api.coingecko.com/api/v3"


class CoinGeckoSource(MetadataSource):
    name = "coingecko"

    def __init__(
        self,
        api_key: str = "",
        max_rps: float = 0.5,
        http: httpx.AsyncClient | None = None,
        rate_limiter: RateLimiter | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        super().__init__(timeout=timeout, rate_limiter=rate_limiter or RateLimiter(max_rps))
        headers = {"Accept": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            base_url=BASE_URL, timeout=timeout, headers=headers
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, mint: str) -> PartialMetadata | None:
        params = {
            "contract_addresses": mint,
            "vs_currencies": "usd",
            "include_market_cap": "true",
            "include_24hr_vol": "true",
            "include_24hr_change": "true",
        }
        resp = await self._client.get("/simple/token_price/solana", params=params)

        if resp.status_code == 429:
            logger.debug("[COINGECKO] Rate limited")
            return None
        if resp.status_code != 200:
            raise MetadataUnavailableError(f"HTTP {resp.status_code}")

        return _parse_token_price(resp.json(), mint)


def _parse_token_price(data: object, mint: str) -> PartialMetadata | None:
    """CoinGecko may key the response by the address as sent or lower-cased."""
    if not isinstance(data, dict):
        raise MetadataUnavailableError("unexpected payload")

    token_data = data.get(mint) or data.get(mint.lower())
    if not token_data:
        return None

    price = CoinGeckoTokenPrice.model_validate(token_data)
    return PartialMetadata(
        price=price.usd,
        market_cap=price.usd_market_cap,
        volume_24h=price.usd_24h_vol,
        price_change_24h=price.usd_24h_change,
    )

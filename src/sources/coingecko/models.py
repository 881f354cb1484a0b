"""Pydantic models for CoinGecko simple token price responses."""

from pydantic import BaseModel


class CoinGeckoTokenPrice(BaseModel):
    usd: float | None = None
    usd_market_cap: float | None = None
    usd_24h_vol: float | None = None
    usd_24h_change: float | None = None

    model_config = {"extra": "ignore"}

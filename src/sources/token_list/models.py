"""Pydantic models for token list entries (Jupiter and Solana Labs lists)."""

from pydantic import BaseModel


class TokenListExtensions(BaseModel):
    website: str | None = None
    twitter: str | None = None
    coingeckoId: str | None = None
    description: str | None = None

    model_config = {"extra": "ignore"}


class TokenListEntry(BaseModel):
    address: str
    name: str | None = None
    symbol: str | None = None
    logoURI: str | None = None
    decimals: int | None = None
    description: str | None = None
    verified: bool | None = None
    tags: list[str] = []
    extensions: TokenListExtensions | None = None

    model_config = {"extra": "ignore"}

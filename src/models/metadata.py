"""Token metadata shapes: per-source partial result and the merged view."""

from pydantic import BaseModel, ConfigDict


MARKET_FIELDS: tuple[str, ...] = (
    "price",
    "price_change_24h",
    "market_cap",
    "volume_24h",
    "liquidity",
    "dexscreener_url",
)


class PartialMetadata(BaseModel):
    """Whatever a single source could supply. None means the source had no value."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    symbol: str | None = None
    image: str | None = None
    description: str | None = None
    website: str | None = None
    twitter: str | None = None
    verified: bool | None = None

    price: float | None = None
    price_change_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    liquidity: float | None = None
    dexscreener_url: str | None = None

    @property
    def has_identity(self) -> bool:
        """True when a usable (non-blank) name or symbol is present."""
        return bool((self.name or "").strip() or (self.symbol or "").strip())


class TokenMetadata(BaseModel):
    """Merged metadata for one mint. Built once by the resolver, never mutated."""

    model_config = ConfigDict(frozen=True)

    mint: str
    name: str | None = None
    symbol: str | None = None
    image: str | None = None
    description: str | None = None
    website: str | None = None
    twitter: str | None = None
    verified: bool = False

    price: float | None = None
    price_change_24h: float | None = None
    market_cap: float | None = None
    volume_24h: float | None = None
    liquidity: float | None = None
    dexscreener_url: str | None = None

    identity_source: str | None = None  # None = placeholder identity
    sources: tuple[str, ...] = ()

    @property
    def identity_resolved(self) -> bool:
        return self.identity_source is not None

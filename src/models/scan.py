"""Scan output consumed by the presentation and remediation layers.

Serialized with camelCase aliases: ``result.model_dump(by_alias=True, mode="json")``.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.holding import TokenHolding
from src.models.metadata import TokenMetadata
from src.models.risk import RiskLevel, RiskVerdict

_OUTPUT_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


class ClassifiedHolding(BaseModel):
    """A holding with its resolved metadata and risk verdict, flattened."""

    model_config = _OUTPUT_CONFIG

    mint: str
    token_account: str = ""
    amount: int
    decimals: int
    ui_amount: float
    is_nft: bool = False

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
    value_usd: float | None = None

    risk_level: RiskLevel = RiskLevel.SAFE
    issues: tuple[str, ...] = ()

    delegate: str | None = None
    freeze_authority: str | None = None
    close_authority: str | None = None

    @classmethod
    def build(
        cls, holding: TokenHolding, metadata: TokenMetadata, verdict: RiskVerdict
    ) -> "ClassifiedHolding":
        value_usd = holding.ui_amount * metadata.price if metadata.price is not None else None
        return cls(
            mint=holding.mint,
            token_account=holding.token_account,
            amount=holding.amount,
            decimals=holding.decimals,
            ui_amount=holding.ui_amount,
            is_nft=holding.is_nft,
            name=metadata.name,
            symbol=metadata.symbol,
            image=metadata.image,
            description=metadata.description,
            website=metadata.website,
            twitter=metadata.twitter,
            verified=metadata.verified,
            price=metadata.price,
            price_change_24h=metadata.price_change_24h,
            market_cap=metadata.market_cap,
            volume_24h=metadata.volume_24h,
            liquidity=metadata.liquidity,
            dexscreener_url=metadata.dexscreener_url,
            value_usd=value_usd,
            risk_level=verdict.level,
            issues=verdict.issues,
            delegate=holding.delegate,
            freeze_authority=holding.freeze_authority,
            close_authority=holding.close_authority,
        )

    @property
    def has_delegate(self) -> bool:
        return bool(self.delegate)


class ScanResult(BaseModel):
    """Aggregated outcome of one wallet scan. Immutable once built."""

    model_config = _OUTPUT_CONFIG

    owner: str = ""
    tokens: tuple[ClassifiedHolding, ...] = ()
    nfts: tuple[ClassifiedHolding, ...] = ()
    total_tokens: int = 0
    total_nfts: int = Field(default=0, alias="totalNFTs")
    safe_tokens: int = 0
    suspicious_tokens: int = 0
    malicious_tokens: int = 0
    delegate_approvals: int = 0
    total_value_usd: float = 0.0
    risk_score: int = 0
    risk_label: str = "Low Risk"
    recommendations: tuple[str, ...] = ()
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

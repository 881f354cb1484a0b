"""Static reference tables and risk thresholds.

Built once at startup and shared read-only by every scan: the known-scam
denylist, the suspicious keyword list and the canonical symbol → mint map.
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from loguru import logger

from config.settings import Settings, settings

NATIVE_SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
JUP_MINT = "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"

CANONICAL_MINTS: Mapping[str, str] = MappingProxyType(
    {
        "SOL": NATIVE_SOL_MINT,
        "WSOL": NATIVE_SOL_MINT,
        "USDC": USDC_MINT,
        "USDT": USDT_MINT,
        "JUP": JUP_MINT,
        "BONK": BONK_MINT,
    }
)

# Promotional, urgency and authority-impersonation terms.
SUSPICIOUS_KEYWORDS: tuple[str, ...] = (
    "bonus",
    "airdrop",
    "giveaway",
    "claim",
    "reward",
    "free",
    "scam",
    "phish",
    "hack",
    "test",
    "fake",
    "zerolends",
    "originether",
    "official",
    "visit",
    "verify",
)

# Extend through settings.scam_denylist_path; no mints are hard-coded here.
KNOWN_SCAM_MINTS: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ReferenceTables:
    scam_mints: frozenset[str] = KNOWN_SCAM_MINTS
    suspicious_keywords: tuple[str, ...] = SUSPICIOUS_KEYWORDS
    canonical_mints: Mapping[str, str] = field(default_factory=lambda: CANONICAL_MINTS)

    @property
    def canonical_addresses(self) -> frozenset[str]:
        return frozenset(self.canonical_mints.values())

    def canonical_mint_for(self, symbol: str | None) -> str | None:
        if not symbol:
            return None
        return self.canonical_mints.get(symbol.strip().upper())


@dataclass(frozen=True)
class RiskThresholds:
    """Tunable classifier/aggregator constants. Defaults mirror Settings."""

    min_price_usd: float = 0.0001
    min_liquidity_usd: float = 1000.0
    min_volume_24h_usd: float = 100.0
    max_liquidity_to_mcap_ratio: float = 2.0
    supply_outlier_threshold: float = 1_000_000_000_000.0
    bulk_quantity_threshold: float = 100.0
    hardware_wallet_threshold_usd: float = 1000.0
    dedupe_keyword_issues: bool = False

    @classmethod
    def from_settings(cls, s: Settings = settings) -> "RiskThresholds":
        return cls(
            min_price_usd=s.min_price_usd,
            min_liquidity_usd=s.min_liquidity_usd,
            min_volume_24h_usd=s.min_volume_24h_usd,
            max_liquidity_to_mcap_ratio=s.max_liquidity_to_mcap_ratio,
            supply_outlier_threshold=s.supply_outlier_threshold,
            bulk_quantity_threshold=s.bulk_quantity_threshold,
            hardware_wallet_threshold_usd=s.hardware_wallet_threshold_usd,
            dedupe_keyword_issues=s.dedupe_keyword_issues,
        )


def load_denylist(path: str | Path) -> frozenset[str]:
    """Read extra scam mints from a JSON array or a newline-separated file (# comments)."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() == ".json":
        data = json.loads(text)
        if not isinstance(data, list) or not all(isinstance(m, str) for m in data):
            raise ValueError(f"Denylist {p} must be a JSON array of mint strings")
        mints = [m.strip() for m in data]
    else:
        mints = [line.split("#", 1)[0].strip() for line in text.splitlines()]
    return frozenset(m for m in mints if m)


def load_reference_tables(denylist_path: str = "") -> ReferenceTables:
    scam_mints = KNOWN_SCAM_MINTS
    if denylist_path:
        extra = load_denylist(denylist_path)
        logger.info(f"[REFERENCE] Loaded {len(extra)} denylisted mints from {denylist_path}")
        scam_mints = scam_mints | extra
    return ReferenceTables(scam_mints=scam_mints)


@lru_cache(maxsize=1)
def get_reference_tables() -> ReferenceTables:
    """Process-wide tables, loaded on first use from settings."""
    return load_reference_tables(settings.scam_denylist_path)

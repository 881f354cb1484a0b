"""Rule-based risk classifier for a single holding.

Pure and deterministic: no I/O, no shared mutable state. Rules run in a fixed
order and can only raise the level (safe → suspicious → malicious). Once a
rule pins ``malicious`` the remaining rules still run so their issues reach
the remediation layer, but the level stays put.

NFTs (decimals == 0, amount == 1) skip the bulk-quantity and market rules.
"""

import unicodedata

from src.models.holding import TokenHolding
from src.models.metadata import TokenMetadata
from src.models.risk import RiskLevel, RiskVerdict
from src.scanner.reference import ReferenceTables, RiskThresholds
from src.sources.metaplex.decoder import find_master_edition_pda

# Cyrillic letters that render like Latin ones
_HOMOGLYPH_MAP: dict[str, str] = {
    "\u0410": "A",  # Cyrillic A
    "\u0412": "B",  # Cyrillic Ve
    "\u0421": "C",  # Cyrillic Es
    "\u0415": "E",  # Cyrillic Ie
    "\u041D": "H",  # Cyrillic En
    "\u041A": "K",  # Cyrillic Ka
    "\u041C": "M",  # Cyrillic Em
    "\u041E": "O",  # Cyrillic O
    "\u0420": "P",  # Cyrillic Er
    "\u0422": "T",  # Cyrillic Te
    "\u0425": "X",  # Cyrillic Ha
    "\u0430": "a",  # Cyrillic a
    "\u0435": "e",  # Cyrillic ie
    "\u043E": "o",  # Cyrillic o
    "\u0440": "p",  # Cyrillic er
    "\u0441": "c",  # Cyrillic es
    "\u0443": "y",  # Cyrillic u
    "\u0445": "x",  # Cyrillic ha
}


class _Verdict:
    """Escalate-only accumulator: level' = max(level, proposed)."""

    def __init__(self) -> None:
        self.level = RiskLevel.SAFE
        self.issues: list[str] = []

    def flag(self, proposed: RiskLevel, issue: str) -> None:
        self.level = self.level.escalate(proposed)
        self.issues.append(issue)

    def freeze(self) -> RiskVerdict:
        return RiskVerdict(level=self.level, issues=tuple(self.issues))


def classify(
    holding: TokenHolding,
    metadata: TokenMetadata,
    tables: ReferenceTables,
    thresholds: RiskThresholds | None = None,
) -> RiskVerdict:
    """Classify one holding against its resolved metadata."""
    thresholds = thresholds or RiskThresholds()
    verdict = _Verdict()
    is_nft = holding.is_nft

    # 1. Denylist
    if holding.mint in tables.scam_mints:
        verdict.flag(RiskLevel.MALICIOUS, "Known scam token")

    # 2. Missing identity
    identity_resolved = metadata.identity_resolved
    if not identity_resolved:
        verdict.flag(RiskLevel.SUSPICIOUS, "No metadata available")

    # 3. Keywords (placeholder names are derived from the mint, not checked)
    if identity_resolved:
        for issue in _keyword_issues(metadata, tables.suspicious_keywords, thresholds.dedupe_keyword_issues):
            verdict.flag(RiskLevel.SUSPICIOUS, issue)

    # 4. Canonical-symbol impersonation
    canonical_mint = tables.canonical_mint_for(metadata.symbol) if identity_resolved else None
    if canonical_mint is not None and holding.mint != canonical_mint:
        symbol = (metadata.symbol or "").strip().upper()
        verdict.flag(
            RiskLevel.MALICIOUS,
            f"Symbol impersonates {symbol} (canonical mint {canonical_mint[:4]}...{canonical_mint[-4:]})",
        )

    # 5. Delegate
    if holding.has_delegate:
        verdict.flag(RiskLevel.SUSPICIOUS, "Has active delegate approval")

    # 6. Freeze authority
    if _has_foreign_freeze_authority(holding, tables):
        verdict.flag(RiskLevel.SUSPICIOUS, "Freeze authority is active")

    # 7. Supply outlier
    ui_supply = holding.ui_supply
    if ui_supply is not None and ui_supply > thresholds.supply_outlier_threshold:
        verdict.flag(RiskLevel.SUSPICIOUS, "Excessive token supply")

    # 8. Non-divisible bulk holding
    if (
        not is_nft
        and holding.decimals == 0
        and holding.ui_amount > thresholds.bulk_quantity_threshold
    ):
        verdict.flag(RiskLevel.SUSPICIOUS, "High quantity of non-divisible tokens")

    # 9. Invisible / lookalike characters in the name
    name = metadata.name or ""
    if has_invisible_chars(name):
        verdict.flag(RiskLevel.SUSPICIOUS, "Name contains invisible characters")
    if detect_homoglyphs(name):
        verdict.flag(RiskLevel.SUSPICIOUS, "Name contains lookalike characters")

    if is_nft:
        return verdict.freeze()

    # 10. Market signals
    for issue in _market_issues(metadata, thresholds):
        verdict.flag(RiskLevel.SUSPICIOUS, issue)

    # 11. Unverified with activity
    if not metadata.verified and metadata.price is not None and metadata.price > 0:
        verdict.flag(RiskLevel.SUSPICIOUS, "Unverified token with market activity")

    return verdict.freeze()


def _keyword_issues(
    metadata: TokenMetadata, keywords: tuple[str, ...], dedupe: bool
) -> list[str]:
    """One issue per keyword per field, or per keyword when ``dedupe`` is set."""
    fields = (
        ("name", metadata.name),
        ("symbol", metadata.symbol),
        ("description", metadata.description),
    )
    issues: list[str] = []
    seen: set[str] = set()
    for keyword in keywords:
        kw = keyword.lower()
        for field_name, value in fields:
            if not value or kw not in value.lower():
                continue
            if dedupe:
                if kw in seen:
                    continue
                seen.add(kw)
            issues.append(f"Suspicious keyword in {field_name}: {keyword}")
    return issues


def _has_foreign_freeze_authority(holding: TokenHolding, tables: ReferenceTables) -> bool:
    """Freeze authority set and not held by the owner, the mint or its master edition.

    Canonical assets (USDC, USDT...) are exempt: their issuers hold a freeze authority.
    """
    authority = holding.freeze_authority
    if not authority:
        return False
    if holding.mint in tables.canonical_addresses:
        return False
    if authority in (holding.owner, holding.mint):
        return False
    try:
        return authority != find_master_edition_pda(holding.mint)
    except ValueError:
        return True


def _market_issues(metadata: TokenMetadata, thresholds: RiskThresholds) -> list[str]:
    issues: list[str] = []
    price = metadata.price
    liquidity = metadata.liquidity
    volume = metadata.volume_24h
    market_cap = metadata.market_cap

    if price is not None and price < thresholds.min_price_usd:
        issues.append("Extremely low token price")
    if liquidity is not None and liquidity < thresholds.min_liquidity_usd:
        issues.append("Very low liquidity")
    if volume is not None and volume < thresholds.min_volume_24h_usd:
        issues.append("Very low trading volume")
    if (
        liquidity is not None
        and market_cap is not None
        and market_cap > 0
        and liquidity > market_cap * thresholds.max_liquidity_to_mcap_ratio
    ):
        issues.append("Liquidity significantly higher than market cap")
    return issues


def has_invisible_chars(text: str) -> bool:
    """Zero-width and other format (Cf) code points, e.g. U+200B, U+200D, U+FEFF."""
    return any(unicodedata.category(ch) == "Cf" for ch in text)


def detect_homoglyphs(name: str) -> list[str]:
    """Cyrillic lookalike characters found in ``name``, as "А→A" pairs."""
    return [f"{ch}→{_HOMOGLYPH_MAP[ch]}" for ch in name if ch in _HOMOGLYPH_MAP]

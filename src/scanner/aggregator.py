"""Portfolio aggregation: counts, USD value, risk score, recommendations."""

import math
from collections.abc import Sequence

from src.models.risk import RiskLevel
from src.models.scan import ClassifiedHolding, ScanResult
from src.scanner.reference import RiskThresholds

RISK_POINTS: dict[RiskLevel, int] = {
    RiskLevel.SAFE: 0,
    RiskLevel.SUSPICIOUS: 5,
    RiskLevel.MALICIOUS: 10,
}
MAX_POINTS_PER_HOLDING = RISK_POINTS[RiskLevel.MALICIOUS]

REC_MALICIOUS = "🚨 Immediately review and close malicious token accounts"
REC_REVOKE = "🔒 Revoke unnecessary token approvals"
REC_RESEARCH = "🔍 Research suspicious tokens before trading"
REC_HARDWARE_WALLET = "🛡️ Consider using a hardware wallet for security"

GENERAL_RECOMMENDATIONS: tuple[str, ...] = (
    "📊 Check token metrics on trusted explorers before trading",
    "🔑 Never share your seed phrase or private key",
    "🧹 Close empty token accounts to reclaim rent",
)


def compute_risk_score(levels: Sequence[RiskLevel]) -> int:
    """Points normalized against 10 per holding, rounded half up to 0–100."""
    if not levels:
        return 0
    points = sum(RISK_POINTS[level] for level in levels)
    score = math.floor(points * 100 / (MAX_POINTS_PER_HOLDING * len(levels)) + 0.5)
    return max(0, min(100, score))


def risk_label(score: int) -> str:
    if score <= 30:
        return "Low Risk"
    if score <= 60:
        return "Medium Risk"
    return "High Risk"


def build_recommendations(
    *,
    malicious: int,
    delegate_approvals: int,
    suspicious: int,
    total_value_usd: float,
    hardware_wallet_threshold_usd: float,
) -> tuple[str, ...]:
    candidates: list[str] = []
    if malicious > 0:
        candidates.append(REC_MALICIOUS)
    if delegate_approvals > 0:
        candidates.append(REC_REVOKE)
    if suspicious > 0:
        candidates.append(REC_RESEARCH)
    if total_value_usd > hardware_wallet_threshold_usd:
        candidates.append(REC_HARDWARE_WALLET)
    candidates.extend(GENERAL_RECOMMENDATIONS)
    return tuple(dict.fromkeys(candidates))


def sort_by_value(tokens: Sequence[ClassifiedHolding]) -> list[ClassifiedHolding]:
    """Descending USD value; unpriced tokens last in RPC order."""
    return sorted(
        tokens,
        key=lambda t: (t.value_usd is None, -(t.value_usd or 0.0)),
    )


def aggregate(
    owner: str,
    tokens: Sequence[ClassifiedHolding],
    nfts: Sequence[ClassifiedHolding],
    thresholds: RiskThresholds | None = None,
) -> ScanResult:
    thresholds = thresholds or RiskThresholds()
    levels = [h.risk_level for h in (*tokens, *nfts)]

    safe = sum(1 for level in levels if level is RiskLevel.SAFE)
    suspicious = sum(1 for level in levels if level is RiskLevel.SUSPICIOUS)
    malicious = sum(1 for level in levels if level is RiskLevel.MALICIOUS)
    delegate_approvals = sum(1 for t in tokens if t.has_delegate)
    total_value_usd = sum(t.value_usd for t in tokens if t.value_usd is not None)
    score = compute_risk_score(levels)

    return ScanResult(
        owner=owner,
        tokens=tuple(sort_by_value(tokens)),
        nfts=tuple(nfts),
        total_tokens=len(tokens),
        total_nfts=len(nfts),
        safe_tokens=safe,
        suspicious_tokens=suspicious,
        malicious_tokens=malicious,
        delegate_approvals=delegate_approvals,
        total_value_usd=float(total_value_usd),
        risk_score=score,
        risk_label=risk_label(score),
        recommendations=build_recommendations(
            malicious=malicious,
            delegate_approvals=delegate_approvals,
            suspicious=suspicious,
            total_value_usd=total_value_usd,
            hardware_wallet_threshold_usd=thresholds.hardware_wallet_threshold_usd,
        ),
    )

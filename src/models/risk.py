"""Risk levels and verdicts."""

from dataclasses import dataclass
from enum import StrEnum


class RiskLevel(StrEnum):
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def escalate(self, proposed: "RiskLevel") -> "RiskLevel":
        """Return the more severe of the two levels. Never lowers."""
        return proposed if proposed.severity > self.severity else self


_SEVERITY: dict[RiskLevel, int] = {
    RiskLevel.SAFE: 0,
    RiskLevel.SUSPICIOUS: 1,
    RiskLevel.MALICIOUS: 2,
}


@dataclass(frozen=True)
class RiskVerdict:
    """Classification of one holding."""

    level: RiskLevel = RiskLevel.SAFE
    issues: tuple[str, ...] = ()

    @property
    def is_safe(self) -> bool:
        return self.level is RiskLevel.SAFE

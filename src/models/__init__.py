from src.models.holding import TokenHolding
from src.models.metadata import MARKET_FIELDS, PartialMetadata, TokenMetadata
from src.models.risk import RiskLevel, RiskVerdict
from src.models.scan import ClassifiedHolding, ScanResult

__all__ = [
    "TokenHolding",
    "PartialMetadata",
    "TokenMetadata",
    "MARKET_FIELDS",
    "RiskLevel",
    "RiskVerdict",
    "ClassifiedHolding",
    "ScanResult",
]

from dataclasses import dataclass


@dataclass(frozen=True)
class MintInfo:
    """Parsed mint account (jsonParsed encoding)."""

    supply: int = 0
    decimals: int = 0
    mint_authority: str | None = None  # None = renounced
    freeze_authority: str | None = None  # None = safe

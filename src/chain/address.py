import re

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

_BASE58_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


def normalize_solana_address(raw: str) -> str:
    """Strictly validate a Solana account address (base-58, 32 bytes)."""
    s = (raw or "").strip()
    if "..." in s:
        raise ValueError("Ellipses ('...') are not allowed. Provide the full base-58 address.")
    if not _BASE58_RE.match(s):
        raise ValueError("Invalid address: must be 32-44 base-58 characters.")
    try:
        return str(Pubkey.from_string(s))
    except ValueError as e:
        raise ValueError(f"Invalid address: does not decode to a 32-byte public key ({e}).") from e


def is_solana_address(raw: str) -> bool:
    try:
        normalize_solana_address(raw)
    except ValueError:
        return False
    return True

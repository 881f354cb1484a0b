"""Shared test fixtures."""

from collections.abc import Callable
from typing import Any

import pytest

from src.models.holding import TokenHolding
from src.models.metadata import TokenMetadata
from src.scanner.reference import ReferenceTables
from tests.addresses import OTHER_MINT, OWNER, SCAM_MINT


@pytest.fixture
def make_holding() -> Callable[..., TokenHolding]:
    def _make(**overrides: Any) -> TokenHolding:
        fields: dict[str, Any] = {
            "mint": OTHER_MINT,
            "amount": 5_000_000,
            "decimals": 6,
            "token_account": "acct1",
            "owner": OWNER,
        }
        fields.update(overrides)
        return TokenHolding(**fields)

    return _make


@pytest.fixture
def make_metadata() -> Callable[..., TokenMetadata]:
    """Healthy, verified, liquid token metadata unless overridden."""

    def _make(**overrides: Any) -> TokenMetadata:
        fields: dict[str, Any] = {
            "mint": OTHER_MINT,
            "name": "Good Token",
            "symbol": "GOOD",
            "verified": True,
            "price": 2.5,
            "market_cap": 50_000_000.0,
            "volume_24h": 1_000_000.0,
            "liquidity": 5_000_000.0,
            "identity_source": "jupiter_list",
        }
        fields.update(overrides)
        return TokenMetadata(**fields)

    return _make


@pytest.fixture
def tables() -> ReferenceTables:
    return ReferenceTables(scam_mints=frozenset({SCAM_MINT}))

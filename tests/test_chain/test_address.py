"""Tests for Solana address validation."""

import pytest

from src.chain.address import is_solana_address, normalize_solana_address


class TestNormalizeSolanaAddress:
    def test_valid_address(self) -> None:
        addr = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
        assert normalize_solana_address(addr) == addr

    def test_strips_whitespace(self) -> None:
        addr = "So11111111111111111111111111111111111111112"
        assert normalize_solana_address(f"\t{addr}\n") == addr

    def test_ellipsis_rejected(self) -> None:
        with pytest.raises(ValueError, match="Ellipses"):
            normalize_solana_address("EPjFWdd5...TDt1v")

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "short",
            "0x1234567890abcdef1234567890abcdef12345678",
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1vEPjF",
            "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1O",
        ],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(ValueError):
            normalize_solana_address(raw)

    def test_is_solana_address(self) -> None:
        assert is_solana_address("Vote111111111111111111111111111111111111111")
        assert not is_solana_address("not an address")

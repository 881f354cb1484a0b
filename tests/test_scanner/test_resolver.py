"""Tests for multi-source metadata resolution."""

import asyncio

import pytest

from src.models.metadata import PartialMetadata
from src.scanner.resolver import MetadataResolver, placeholder_identity
from src.sources.base import MetadataSource

MINT = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"


class FakeSource(MetadataSource):
    def __init__(
        self,
        name: str,
        result: PartialMetadata | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        timeout: float = 1.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self.name = name
        self._result = result
        self._error = error
        self._delay = delay
        self.calls: list[str] = []

    async def fetch(self, mint: str) -> PartialMetadata | None:
        self.calls.append(mint)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._result


class TestPlaceholder:
    def test_format(self) -> None:
        name, symbol = placeholder_identity(MINT)
        assert name == "Token (ATok...8knL)"
        assert symbol == "ATok"

    def test_deterministic(self) -> None:
        assert placeholder_identity(MINT) == placeholder_identity(MINT)


class TestIdentityChain:
    @pytest.mark.asyncio
    async def test_first_identity_source_wins(self) -> None:
        jupiter = FakeSource("jupiter_list", PartialMetadata(name="Jup Name", symbol="JN", verified=True))
        solana = FakeSource("solana_list", PartialMetadata(name="Other", symbol="OT"))
        resolver = MetadataResolver([jupiter, solana])

        meta = await resolver.resolve(MINT)

        assert meta.name == "Jup Name"
        assert meta.symbol == "JN"
        assert meta.verified is True
        assert meta.identity_source == "jupiter_list"
        assert solana.calls == []

    @pytest.mark.asyncio
    async def test_falls_through_when_source_has_nothing(self) -> None:
        jupiter = FakeSource("jupiter_list", None)
        metaplex = FakeSource("metaplex", PartialMetadata(name="OnChain", symbol="OC", image="https://x/img.png"))
        resolver = MetadataResolver([jupiter, metaplex])

        meta = await resolver.resolve(MINT)

        assert meta.name == "OnChain"
        assert meta.identity_source == "metaplex"
        assert meta.verified is False
        assert jupiter.calls == [MINT]

    @pytest.mark.asyncio
    async def test_blank_identity_does_not_stop_chain(self) -> None:
        blank = FakeSource("jupiter_list", PartialMetadata(name="  ", symbol="", image="https://x/a.png"))
        metaplex = FakeSource("metaplex", PartialMetadata(name="Real", image="https://x/b.png"))
        resolver = MetadataResolver([blank, metaplex])

        meta = await resolver.resolve(MINT)

        assert meta.name == "Real"
        # earlier source keeps precedence for fields it did supply
        assert meta.image == "https://x/a.png"
        assert meta.identity_source == "metaplex"

    @pytest.mark.asyncio
    async def test_failing_source_treated_as_absent(self) -> None:
        broken = FakeSource("jupiter_list", error=RuntimeError("boom"))
        metaplex = FakeSource("metaplex", PartialMetadata(name="Ok", symbol="OK"))
        meta = await MetadataResolver([broken, metaplex]).resolve(MINT)
        assert meta.name == "Ok"

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self) -> None:
        slow = FakeSource("jupiter_list", PartialMetadata(name="Late"), delay=1.0, timeout=0.05)
        metaplex = FakeSource("metaplex", PartialMetadata(name="Fast"))
        meta = await MetadataResolver([slow, metaplex]).resolve(MINT)
        assert meta.name == "Fast"

    @pytest.mark.asyncio
    async def test_placeholder_when_nothing_found(self) -> None:
        resolver = MetadataResolver(
            [FakeSource("jupiter_list"), FakeSource("metaplex", error=ValueError("bad"))]
        )
        meta = await resolver.resolve(MINT)

        assert meta.name == "Token (ATok...8knL)"
        assert meta.symbol == "ATok"
        assert meta.identity_source is None
        assert not meta.identity_resolved
        assert meta.verified is False

    @pytest.mark.asyncio
    async def test_no_sources(self) -> None:
        meta = await MetadataResolver().resolve(MINT)
        assert meta.identity_source is None
        assert meta.price is None


class TestMarketChain:
    @pytest.mark.asyncio
    async def test_market_tried_even_when_identity_found(self) -> None:
        jupiter = FakeSource("jupiter_list", PartialMetadata(name="Tok", symbol="TK"))
        coingecko = FakeSource("coingecko", PartialMetadata(price=1.5, market_cap=1e6))
        resolver = MetadataResolver([jupiter], [coingecko])

        meta = await resolver.resolve(MINT)

        assert coingecko.calls == [MINT]
        assert meta.price == 1.5
        assert meta.market_cap == 1e6
        assert meta.sources == ("jupiter_list", "coingecko")

    @pytest.mark.asyncio
    async def test_market_source_cannot_override_identity(self) -> None:
        jupiter = FakeSource("jupiter_list", PartialMetadata(name="Tok", symbol="TK"))
        dex = FakeSource("dexscreener", PartialMetadata(name="Spoof", symbol="USDC", price=2.0))
        meta = await MetadataResolver([jupiter], [dex]).resolve(MINT)
        assert meta.name == "Tok"
        assert meta.symbol == "TK"
        assert meta.price == 2.0

    @pytest.mark.asyncio
    async def test_market_identity_does_not_replace_placeholder(self) -> None:
        dex = FakeSource("dexscreener", PartialMetadata(name="Named", price=2.0))
        meta = await MetadataResolver([], [dex]).resolve(MINT)
        assert meta.identity_source is None
        assert meta.name == "Token (ATok...8knL)"
        assert meta.price == 2.0

    @pytest.mark.asyncio
    async def test_market_first_writer_wins(self) -> None:
        coingecko = FakeSource("coingecko", PartialMetadata(price=1.0, volume_24h=500.0))
        dex = FakeSource(
            "dexscreener",
            PartialMetadata(price=9.0, liquidity=20_000.0, dexscreener_url="https://dexscreener.com/solana/x"),
        )
        meta = await MetadataResolver([], [coingecko, dex]).resolve(MINT)
        assert meta.price == 1.0
        assert meta.volume_24h == 500.0
        assert meta.liquidity == 20_000.0
        assert meta.dexscreener_url == "https://dexscreener.com/solana/x"

    @pytest.mark.asyncio
    async def test_market_chain_stops_when_complete(self) -> None:
        complete = PartialMetadata(
            price=1.0,
            price_change_24h=0.5,
            market_cap=1e6,
            volume_24h=1e4,
            liquidity=1e5,
            dexscreener_url="https://dexscreener.com/solana/x",
        )
        first = FakeSource("dexscreener", complete)
        second = FakeSource("coingecko", PartialMetadata(price=3.0))
        await MetadataResolver([], [first, second]).resolve(MINT)
        assert second.calls == []

    @pytest.mark.asyncio
    async def test_zero_price_is_kept(self) -> None:
        coingecko = FakeSource("coingecko", PartialMetadata(price=0.0))
        dex = FakeSource("dexscreener", PartialMetadata(price=4.0))
        meta = await MetadataResolver([], [coingecko, dex]).resolve(MINT)
        assert meta.price == 0.0

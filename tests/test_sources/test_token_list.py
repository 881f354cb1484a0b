"""Tests for the token list sources."""

import httpx
import pytest

from src.scanner.exceptions import MetadataUnavailableError
from src.sources.token_list.client import JupiterTokenList, SolanaTokenList, TokenListSource

MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
UNLISTED = "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"

JUPITER_PAYLOAD = [
    {
        "address": MINT,
        "name": "USD Coin",
        "symbol": "USDC",
        "decimals": 6,
        "logoURI": "https://example.com/usdc.png",
        "tags": ["verified", "community"],
        "extensions": {"coingeckoId": "usd-coin"},
    },
    {"address": "CommunityMint111", "name": "Meme", "symbol": "MEME", "tags": ["community"]},
    {"name": "no address"},
]

SOLANA_PAYLOAD = {
    "name": "Solana Token List",
    "tokens": [
        {
            "chainId": 101,
            "address": MINT,
            "name": "USD Coin",
            "symbol": "USDC",
            "logoURI": "https://example.com/usdc.png",
            "extensions": {"website": "https://www.centre.io/", "twitter": "https://twitter.com/circle"},
        }
    ],
}


def _client(payload: object, status: int = 200, counter: list | None = None) -> httpx.AsyncClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if counter is not None:
            counter.append(request.url)
        return httpx.Response(status, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestJupiterTokenList:
    @pytest.mark.asyncio
    async def test_listed_token(self) -> None:
        source = JupiterTokenList(http=_client(JUPITER_PAYLOAD))
        meta = await source.fetch(MINT)
        assert meta is not None
        assert meta.name == "USD Coin"
        assert meta.symbol == "USDC"
        assert meta.image == "https://example.com/usdc.png"
        assert meta.verified is True

    @pytest.mark.asyncio
    async def test_community_only_not_verified(self) -> None:
        source = JupiterTokenList(http=_client(JUPITER_PAYLOAD))
        meta = await source.fetch("CommunityMint111")
        assert meta is not None
        assert meta.verified is False

    @pytest.mark.asyncio
    async def test_unlisted_returns_none(self) -> None:
        source = JupiterTokenList(http=_client(JUPITER_PAYLOAD))
        assert await source.fetch(UNLISTED) is None

    @pytest.mark.asyncio
    async def test_accepts_wrapped_payload(self) -> None:
        source = JupiterTokenList(http=_client({"tokens": JUPITER_PAYLOAD}))
        meta = await source.fetch(MINT)
        assert meta is not None and meta.symbol == "USDC"

    @pytest.mark.asyncio
    async def test_downloads_once(self) -> None:
        calls: list = []
        source = JupiterTokenList(http=_client(JUPITER_PAYLOAD, counter=calls))
        await source.fetch(MINT)
        await source.fetch(UNLISTED)
        await source.lookup("CommunityMint111")
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_http_error_raises_and_lookup_returns_none(self) -> None:
        calls: list = []
        source = JupiterTokenList(http=_client({}, status=503, counter=calls))
        with pytest.raises(MetadataUnavailableError):
            await source.fetch(MINT)
        assert await source.lookup(MINT) is None
        # failure is remembered
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_unexpected_shape(self) -> None:
        source = JupiterTokenList(http=_client({"unexpected": True}))
        assert await source.lookup(MINT) is None


class TestSolanaTokenList:
    @pytest.mark.asyncio
    async def test_listed_token_is_verified(self) -> None:
        source = SolanaTokenList(http=_client(SOLANA_PAYLOAD))
        meta = await source.fetch(MINT)
        assert meta is not None
        assert meta.verified is True
        assert meta.website == "https://www.centre.io/"
        assert meta.twitter == "https://twitter.com/circle"

    @pytest.mark.asyncio
    async def test_missing_tokens_array(self) -> None:
        source = SolanaTokenList(http=_client([]))
        with pytest.raises(MetadataUnavailableError):
            await source.fetch(MINT)


class TestTokenListSource:
    def test_subclass_must_extract_entries(self) -> None:
        class NoEntries(TokenListSource):
            name = "no_entries"

        with pytest.raises(TypeError):
            NoEntries(url="https://lists.test/none")

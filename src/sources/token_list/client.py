"""Token list sources: curated Jupiter list and the official Solana Labs list.

Both lists are large static JSON documents. Each source downloads its list
once (first lookup), indexes it by mint and serves every holding of the scan
from that snapshot. The download runs as a single shared task: a holding whose
lookup times out does not cancel it, and a failed download is remembered for
the lifetime of the source so later holdings don't re-request it.
"""

import asyncio
from abc import abstractmethod
from typing import Any

import httpx
from loguru import logger

from src.models.metadata import PartialMetadata
from src.scanner.exceptions import MetadataUnavailableError
from src.sources.base import MetadataSource
from src.sources.token_list.models import TokenListEntry

JUPITER_LIST_URL = "https://token.jup.ag/all"
SOLANA_LIST_URL = (
    "https://raw.githubusercontent.com/solana-labs/token-list/main/src/tokens/solana.tokenlist.json"
)
LIST_TIMEOUT_SEC = 30.0

_VERIFIED_TAGS = {"verified", "strict"}


class TokenListSource(MetadataSource):
    """Base for list-backed sources. Subclasses pick the entries and the verified flag."""

    name = "token_list"

    def __init__(
        self,
        url: str,
        http: httpx.AsyncClient | None = None,
        timeout: float = LIST_TIMEOUT_SEC,
    ) -> None:
        super().__init__(timeout=timeout)
        self._url = url
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=timeout, headers={"Accept": "application/json"}
        )
        self._load_task: asyncio.Task[dict[str, dict[str, Any]]] | None = None

    async def close(self) -> None:
        if self._load_task is not None and not self._load_task.done():
            self._load_task.cancel()
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, mint: str) -> PartialMetadata | None:
        index = await self._snapshot()
        raw = index.get(mint)
        if raw is None:
            return None
        entry = TokenListEntry.model_validate(raw)
        return self._to_metadata(entry)

    async def _snapshot(self) -> dict[str, dict[str, Any]]:
        # No await between check and set: one download per source.
        if self._load_task is None:
            self._load_task = asyncio.create_task(self._download())
        return await asyncio.shield(self._load_task)

    async def _download(self) -> dict[str, dict[str, Any]]:
        try:
            resp = await self._client.get(self._url)
            if resp.status_code != 200:
                raise MetadataUnavailableError(f"HTTP {resp.status_code}")
            entries = self._extract_entries(resp.json())
        except (httpx.HTTPError, ValueError, MetadataUnavailableError) as e:
            logger.warning(f"[{self.name.upper()}] List unavailable: {e}")
            raise MetadataUnavailableError(f"{self.name} list unavailable: {e}") from e

        index = {
            item["address"]: item
            for item in entries
            if isinstance(item, dict) and isinstance(item.get("address"), str)
        }
        logger.debug(f"[{self.name.upper()}] Loaded {len(index)} tokens")
        return index

    @abstractmethod
    def _extract_entries(self, data: Any) -> list[Any]:
        """Pull the token array out of the downloaded document."""

    def _to_metadata(self, entry: TokenListEntry) -> PartialMetadata:
        ext = entry.extensions
        return PartialMetadata(
            name=entry.name,
            symbol=entry.symbol,
            image=entry.logoURI,
            description=entry.description or (ext.description if ext else None),
            website=ext.website if ext else None,
            twitter=ext.twitter if ext else None,
            verified=self._is_verified(entry),
        )

    def _is_verified(self, entry: TokenListEntry) -> bool:
        return bool(entry.verified)


class JupiterTokenList(TokenListSource):
    """Jupiter's curated list. Most complete for Solana and carries verification tags."""

    name = "jupiter_list"

    def __init__(self, url: str = JUPITER_LIST_URL, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)

    def _extract_entries(self, data: Any) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("tokens"), list):
            return data["tokens"]
        raise MetadataUnavailableError("unexpected list payload")

    def _is_verified(self, entry: TokenListEntry) -> bool:
        return bool(entry.verified) or bool(_VERIFIED_TAGS.intersection(entry.tags))


class SolanaTokenList(TokenListSource):
    """Official Solana Labs list. Presence on it counts as verified."""

    name = "solana_list"

    def __init__(self, url: str = SOLANA_LIST_URL, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)

    def _extract_entries(self, data: Any) -> list[Any]:
        tokens = data.get("tokens") if isinstance(data, dict) else None
        if not isinstance(tokens, list):
            raise MetadataUnavailableError("missing 'tokens' array")
        return tokens

    def _is_verified(self, entry: TokenListEntry) -> bool:
        return True

"""On-chain Metaplex metadata source.

Reads the Token Metadata account for a mint through the chain RPC, then
dereferences its off-chain JSON URI for description, image and website.
An unreachable URI still yields the on-chain name and symbol.
"""

from typing import Any

import httpx
from loguru import logger

from src.chain.client import SolanaRpcClient
from src.models.metadata import PartialMetadata
from src.sources.base import DEFAULT_TIMEOUT_SEC, MetadataSource
from src.sources.metaplex.decoder import decode_metadata, find_metadata_pda

IPFS_GATEWAY = "https://ipfs.io/ipfs/"
ARWEAVE_GATEWAY = "https://arweave.net/"


class MetaplexMetadataSource(MetadataSource):
    name = "metaplex"

    def __init__(
        self,
        rpc: SolanaRpcClient,
        http: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SEC,
    ) -> None:
        super().__init__(timeout=timeout)
        self._rpc = rpc
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch(self, mint: str) -> PartialMetadata | None:
        data = await self._rpc.get_account_data(find_metadata_pda(mint))
        if data is None:
            return None

        onchain = decode_metadata(data)
        if onchain is None:
            return None

        offchain = await self._fetch_offchain_json(onchain.uri) if onchain.uri else {}
        return PartialMetadata(
            name=onchain.name or None,
            symbol=onchain.symbol or None,
            image=_str_or_none(offchain.get("image")),
            description=_str_or_none(offchain.get("description")),
            website=_str_or_none(offchain.get("external_url")),
        )

    async def _fetch_offchain_json(self, uri: str) -> dict[str, Any]:
        url = resolve_uri(uri)
        try:
            resp = await self._client.get(url)
            if resp.status_code != 200:
                logger.debug(f"[METAPLEX] URI HTTP {resp.status_code}: {url[:60]}")
                return {}
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"[METAPLEX] URI fetch failed for {url[:60]}: {e}")
            return {}
        return data if isinstance(data, dict) else {}


def resolve_uri(uri: str) -> str:
    """Rewrite ipfs:// and ar:// URIs to public HTTP gateways."""
    if uri.startswith("ipfs://"):
        path = uri[len("ipfs://"):]
        if path.startswith("ipfs/"):
            path = path[len("ipfs/"):]
        return IPFS_GATEWAY + path
    if uri.startswith("ar://"):
        return ARWEAVE_GATEWAY + uri[len("ar://"):]
    return uri


def _str_or_none(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None

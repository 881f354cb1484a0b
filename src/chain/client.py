"""Solana JSON-RPC client: token holdings, mint accounts, raw account data.

Holdings come from getTokenAccountsByOwner (jsonParsed) for both the SPL Token
and Token-2022 programs. Mint accounts are read in batches through
getMultipleAccounts to attach supply and authorities to each holding.
"""

import base64
from typing import Any

import httpx
from loguru import logger

from src.chain.models import MintInfo
from src.models.holding import TokenHolding
from src.scanner.exceptions import UpstreamUnavailableError

DEFAULT_RPC_URL = "https://api.mainnet-beta.solana.com"

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"
TOKEN_PROGRAMS = (TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID)

MAX_ACCOUNTS_PER_CALL = 100


class SolanaRpcClient:
    """Async JSON-RPC client. Every failure surfaces as UpstreamUnavailableError."""

    def __init__(
        self,
        rpc_url: str = DEFAULT_RPC_URL,
        http: httpx.AsyncClient | None = None,
        timeout: float = 15.0,
    ) -> None:
        self._rpc_url = rpc_url or DEFAULT_RPC_URL
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _call(self, method: str, params: list[Any]) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise UpstreamUnavailableError(f"{method}: {type(e).__name__}: {e}") from e

        if resp.status_code != 200:
            raise UpstreamUnavailableError(f"{method}: HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise UpstreamUnavailableError(f"{method}: invalid JSON response") from e

        if not isinstance(data, dict):
            raise UpstreamUnavailableError(f"{method}: unexpected response shape")
        if "error" in data:
            raise UpstreamUnavailableError(f"{method}: RPC error {data['error']}")
        return data.get("result")

    async def get_token_holdings(self, owner: str) -> list[TokenHolding]:
        """All token accounts of ``owner`` across both token programs, with mint info attached."""
        holdings: list[TokenHolding] = []
        for program_id in TOKEN_PROGRAMS:
            result = await self._call(
                "getTokenAccountsByOwner",
                [
                    owner,
                    {"programId": program_id},
                    {"encoding": "jsonParsed", "commitment": "confirmed"},
                ],
            )
            accounts = result.get("value") if isinstance(result, dict) else None
            if not isinstance(accounts, list):
                raise UpstreamUnavailableError("getTokenAccountsByOwner: missing value list")

            for account in accounts:
                holding = _parse_token_account(account, owner)
                if holding is not None:
                    holdings.append(holding)

        if not holdings:
            return holdings

        mints = list(dict.fromkeys(h.mint for h in holdings))
        try:
            mint_infos = await self.get_mint_infos(mints)
        except UpstreamUnavailableError as e:
            logger.warning(f"[RPC] Mint accounts unavailable, continuing without supply/authorities: {e}")
            return holdings

        return [_attach_mint_info(h, mint_infos.get(h.mint)) for h in holdings]

    async def get_mint_infos(self, mints: list[str]) -> dict[str, MintInfo]:
        infos: dict[str, MintInfo] = {}
        for start in range(0, len(mints), MAX_ACCOUNTS_PER_CALL):
            batch = mints[start:start + MAX_ACCOUNTS_PER_CALL]
            result = await self._call(
                "getMultipleAccounts",
                [batch, {"encoding": "jsonParsed", "commitment": "confirmed"}],
            )
            values = result.get("value") if isinstance(result, dict) else None
            if not isinstance(values, list):
                raise UpstreamUnavailableError("getMultipleAccounts: missing value list")

            for mint, account in zip(batch, values):
                info = _parse_mint_account(account)
                if info is not None:
                    infos[mint] = info
        return infos

    async def get_account_data(self, address: str) -> bytes | None:
        """Raw account bytes (base64 encoding). None if the account doesn't exist."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": "confirmed"}],
        )
        value = result.get("value") if isinstance(result, dict) else None
        if not value:
            return None

        raw = value.get("data", [])
        if not isinstance(raw, list) or not raw:
            return None
        try:
            return base64.b64decode(raw[0])
        except ValueError as e:
            raise UpstreamUnavailableError(f"getAccountInfo: bad base64 for {address[:12]}") from e


def _parse_token_account(account: Any, owner: str) -> TokenHolding | None:
    """Parse one jsonParsed token account entry. Malformed entries are skipped."""
    try:
        data = account["account"]["data"]
        info = data["parsed"]["info"]
        token_amount = info["tokenAmount"]
        delegated = info.get("delegatedAmount") or {}
        return TokenHolding(
            token_account=str(account.get("pubkey", "")),
            owner=info.get("owner") or owner,
            mint=info["mint"],
            amount=int(token_amount["amount"]),
            decimals=int(token_amount["decimals"]),
            program=data.get("program", "spl-token"),
            delegate=info.get("delegate") or None,
            delegated_amount=int(delegated["amount"]) if delegated.get("amount") else None,
            close_authority=info.get("closeAuthority") or None,
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"[RPC] Skipping malformed token account: {type(e).__name__}: {e}")
        return None


def _parse_mint_account(account: Any) -> MintInfo | None:
    if not isinstance(account, dict):
        return None
    try:
        info = account["data"]["parsed"]["info"]
        return MintInfo(
            supply=int(info.get("supply", 0)),
            decimals=int(info.get("decimals", 0)),
            mint_authority=info.get("mintAuthority") or None,
            freeze_authority=info.get("freezeAuthority") or None,
        )
    except (KeyError, TypeError, ValueError):
        return None


def _attach_mint_info(holding: TokenHolding, info: MintInfo | None) -> TokenHolding:
    if info is None:
        return holding
    return holding.model_copy(
        update={
            "supply": info.supply,
            "mint_authority": info.mint_authority,
            "freeze_authority": info.freeze_authority,
        }
    )

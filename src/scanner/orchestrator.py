"""Wallet scan entry point.

owner → RPC holdings → drop zero balances → resolve + classify each holding
concurrently → partition tokens/NFTs → aggregate. The scan either returns a
complete ScanResult or raises; there are no partial results.
"""

import asyncio
from contextlib import AsyncExitStack

from loguru import logger

from config.settings import Settings, settings
from src.chain.address import normalize_solana_address
from src.chain.client import SolanaRpcClient
from src.models.holding import TokenHolding
from src.models.scan import ClassifiedHolding, ScanResult
from src.scanner.aggregator import aggregate
from src.scanner.classifier import classify
from src.scanner.exceptions import InvalidAddressError
from src.scanner.reference import (
    ReferenceTables,
    RiskThresholds,
    get_reference_tables,
    load_reference_tables,
)
from src.scanner.resolver import MetadataResolver
from src.sources.base import MetadataSource
from src.sources.coingecko.client import CoinGeckoSource
from src.sources.dexscreener.client import DexScreenerSource
from src.sources.metaplex.client import MetaplexMetadataSource
from src.sources.token_list.client import JupiterTokenList, SolanaTokenList


class WalletScanner:
    def __init__(
        self,
        rpc: SolanaRpcClient,
        resolver: MetadataResolver,
        tables: ReferenceTables | None = None,
        thresholds: RiskThresholds | None = None,
        max_concurrency: int = 8,
    ) -> None:
        self._rpc = rpc
        self._resolver = resolver
        self._tables = tables or get_reference_tables()
        self._thresholds = thresholds or RiskThresholds()
        self._max_concurrency = max(1, max_concurrency)

    async def scan(self, owner: str) -> ScanResult:
        """Scan one wallet.

        Raises:
            InvalidAddressError: owner is not a valid Solana address (no I/O done).
            UpstreamUnavailableError: the chain RPC call failed.
        """
        try:
            owner = normalize_solana_address(owner)
        except ValueError as e:
            raise InvalidAddressError(str(e)) from e

        holdings = await self._rpc.get_token_holdings(owner)
        active = [h for h in holdings if h.ui_amount != 0]
        logger.info(
            f"[SCAN] {owner[:8]}...: {len(active)} holdings "
            f"({len(holdings) - len(active)} empty skipped)"
        )

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(holding: TokenHolding) -> ClassifiedHolding:
            async with semaphore:
                return await self.classify_holding(holding)

        classified = await asyncio.gather(*(_bounded(h) for h in active))

        tokens = [c for c in classified if not c.is_nft]
        nfts = [c for c in classified if c.is_nft]
        result = aggregate(owner, tokens, nfts, self._thresholds)
        logger.info(
            f"[SCAN] {owner[:8]}... done: score={result.risk_score} "
            f"suspicious={result.suspicious_tokens} malicious={result.malicious_tokens} "
            f"delegates={result.delegate_approvals}"
        )
        return result

    async def classify_holding(self, holding: TokenHolding) -> ClassifiedHolding:
        metadata = await self._resolver.resolve(holding.mint)
        verdict = classify(holding, metadata, self._tables, self._thresholds)
        if not verdict.is_safe:
            logger.debug(
                f"[SCAN] {holding.mint[:12]} {verdict.level}: {'; '.join(verdict.issues)}"
            )
        return ClassifiedHolding.build(holding, metadata, verdict)


def build_sources(
    rpc: SolanaRpcClient, s: Settings = settings
) -> tuple[list[MetadataSource], list[MetadataSource]]:
    """Identity and market sources in priority order, per the enable flags."""
    identity: list[MetadataSource] = []
    market: list[MetadataSource] = []

    if s.enable_jupiter_list:
        identity.append(JupiterTokenList(url=s.jupiter_token_list_url, timeout=s.token_list_timeout_sec))
    if s.enable_solana_list:
        identity.append(SolanaTokenList(url=s.solana_token_list_url, timeout=s.token_list_timeout_sec))
    if s.enable_metaplex:
        identity.append(MetaplexMetadataSource(rpc, timeout=s.source_timeout_sec))
    if s.enable_coingecko:
        market.append(
            CoinGeckoSource(
                api_key=s.coingecko_api_key,
                max_rps=s.coingecko_max_rps,
                timeout=s.source_timeout_sec,
            )
        )
    if s.enable_dexscreener:
        market.append(DexScreenerSource(max_rps=s.dexscreener_max_rps, timeout=s.source_timeout_sec))

    return identity, market


async def scan_wallet(owner: str, s: Settings = settings) -> ScanResult:
    """Run one scan with fresh clients, closed when the scan ends."""
    try:
        owner = normalize_solana_address(owner)
    except ValueError as e:
        raise InvalidAddressError(str(e)) from e

    # The cached tables belong to the module-level settings only
    tables = get_reference_tables() if s is settings else load_reference_tables(s.scam_denylist_path)

    async with AsyncExitStack() as stack:
        rpc = SolanaRpcClient(s.solana_rpc_url, timeout=s.rpc_timeout_sec)
        stack.push_async_callback(rpc.close)

        identity, market = build_sources(rpc, s)
        for source in (*identity, *market):
            stack.push_async_callback(source.close)

        scanner = WalletScanner(
            rpc,
            MetadataResolver(identity, market),
            tables=tables,
            thresholds=RiskThresholds.from_settings(s),
            max_concurrency=s.max_concurrent_holdings,
        )
        return await scanner.scan(owner)

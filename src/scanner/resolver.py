"""Multi-source metadata resolution for one mint.

Identity sources (curated list → official list → on-chain metadata) are tried
in order and the chain stops at the first one that yields a usable name or
symbol. Market sources (price/liquidity providers) are always tried,
concurrently with the identity chain, and only contribute market fields.

Merge is first-writer-wins per field in priority order (identity sources
first, then market sources), so precedence never depends on which call
finished first.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from loguru import logger

from src.models.metadata import MARKET_FIELDS, PartialMetadata, TokenMetadata
from src.sources.base import MetadataSource


def placeholder_identity(mint: str) -> tuple[str, str]:
    """Deterministic (name, symbol) label for a mint nobody could identify."""
    return f"Token ({mint[:4]}...{mint[-4:]})", mint[:4]


class MetadataResolver:
    def __init__(
        self,
        identity_sources: Sequence[MetadataSource] = (),
        market_sources: Sequence[MetadataSource] = (),
    ) -> None:
        self._identity_sources = tuple(identity_sources)
        self._market_sources = tuple(market_sources)

    async def resolve(self, mint: str) -> TokenMetadata:
        identity_results, market_results = await asyncio.gather(
            self._resolve_identity(mint),
            self._resolve_market(mint),
        )

        merged: dict[str, Any] = {}
        contributors: list[str] = []
        identity_source: str | None = None

        for source_name, partial in identity_results:
            if _merge(merged, partial.model_dump(exclude_none=True)):
                contributors.append(source_name)
            if identity_source is None and partial.has_identity:
                identity_source = source_name

        for source_name, partial in market_results:
            market = {k: v for k, v in partial.model_dump(exclude_none=True).items() if k in MARKET_FIELDS}
            if _merge(merged, market):
                contributors.append(source_name)

        if identity_source is None:
            name, symbol = placeholder_identity(mint)
            merged["name"] = name
            merged["symbol"] = symbol
            logger.debug(f"[RESOLVER] No identity for {mint[:12]}, using placeholder")

        merged.setdefault("verified", False)
        return TokenMetadata(
            mint=mint,
            identity_source=identity_source,
            sources=tuple(contributors),
            **merged,
        )

    async def _resolve_identity(self, mint: str) -> list[tuple[str, PartialMetadata]]:
        results: list[tuple[str, PartialMetadata]] = []
        for source in self._identity_sources:
            partial = await source.lookup(mint)
            if partial is None:
                continue
            results.append((source.name, partial))
            if partial.has_identity:
                break
        return results

    async def _resolve_market(self, mint: str) -> list[tuple[str, PartialMetadata]]:
        results: list[tuple[str, PartialMetadata]] = []
        filled: set[str] = set()
        for source in self._market_sources:
            partial = await source.lookup(mint)
            if partial is None:
                continue
            results.append((source.name, partial))
            filled.update(k for k in MARKET_FIELDS if getattr(partial, k) is not None)
            if filled.issuperset(MARKET_FIELDS):
                break
        return results


def _merge(target: dict[str, Any], values: dict[str, Any]) -> bool:
    """Fill fields ``target`` doesn't have yet. Blank strings don't count as values."""
    wrote = False
    for key, value in values.items():
        if isinstance(value, str) and not value.strip():
            continue
        if key not in target:
            target[key] = value
            wrote = True
    return wrote

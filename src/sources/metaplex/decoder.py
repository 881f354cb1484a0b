"""Decode Metaplex Token Metadata accounts and derive their addresses.

Layout (Borsh, MetadataV1):
  0       key (u8, 4 = MetadataV1)
  1:33    update_authority (Pubkey)
  33:65   mint (Pubkey)
  65      name   (u32 LE length + bytes, NUL padded to 32)
  ...     symbol (u32 LE length + bytes, NUL padded to 10)
  ...     uri    (u32 LE length + bytes, NUL padded to 200)
  ...     seller_fee_basis_points (u16)
  ...     creators (Option<Vec<Creator>>, 34 bytes per creator)
  ...     primary_sale_happened (bool), is_mutable (bool)
"""

import struct
from dataclasses import dataclass

from loguru import logger
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

METADATA_V1_KEY = 4
_HEADER_SIZE = 65
_CREATOR_SIZE = 34


@dataclass(frozen=True)
class MetaplexMetadata:
    """On-chain Metaplex metadata, NUL padding stripped."""

    update_authority: str
    mint: str
    name: str
    symbol: str
    uri: str
    seller_fee_basis_points: int = 0
    is_mutable: bool | None = None


def find_metadata_pda(mint: str) -> str:
    """Metadata account address: PDA of ["metadata", program_id, mint]."""
    pda, _bump = Pubkey.find_program_address(
        [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(Pubkey.from_string(mint))],
        TOKEN_METADATA_PROGRAM_ID,
    )
    return str(pda)


def find_master_edition_pda(mint: str) -> str:
    """Master edition address: PDA of ["metadata", program_id, mint, "edition"].

    Standard NFTs hand their mint and freeze authority to this account.
    """
    pda, _bump = Pubkey.find_program_address(
        [
            b"metadata",
            bytes(TOKEN_METADATA_PROGRAM_ID),
            bytes(Pubkey.from_string(mint)),
            b"edition",
        ],
        TOKEN_METADATA_PROGRAM_ID,
    )
    return str(pda)


def decode_metadata(data: bytes) -> MetaplexMetadata | None:
    """Decode raw metadata account bytes. Returns None on short or foreign data."""
    if len(data) < _HEADER_SIZE + 4:
        logger.debug(f"[METAPLEX] Metadata too short: {len(data)} bytes")
        return None
    if data[0] != METADATA_V1_KEY:
        logger.debug(f"[METAPLEX] Unexpected account key {data[0]}")
        return None

    try:
        update_authority = str(Pubkey.from_bytes(data[1:33]))
        mint = str(Pubkey.from_bytes(data[33:65]))

        offset = _HEADER_SIZE
        name, offset = _read_string(data, offset)
        symbol, offset = _read_string(data, offset)
        uri, offset = _read_string(data, offset)
    except (struct.error, ValueError) as e:
        logger.debug(f"[METAPLEX] Failed to decode metadata: {e}")
        return None

    seller_fee, is_mutable = _read_tail(data, offset)

    return MetaplexMetadata(
        update_authority=update_authority,
        mint=mint,
        name=name,
        symbol=symbol,
        uri=uri,
        seller_fee_basis_points=seller_fee,
        is_mutable=is_mutable,
    )


def _read_string(data: bytes, offset: int) -> tuple[str, int]:
    (length,) = struct.unpack_from("<I", data, offset)
    offset += 4
    if offset + length > len(data):
        raise ValueError(f"string length {length} overruns buffer")
    raw = data[offset:offset + length]
    text = raw.decode("utf-8", errors="replace").replace("\x00", "").strip()
    return text, offset + length


def _read_tail(data: bytes, offset: int) -> tuple[int, bool | None]:
    """seller_fee_basis_points and is_mutable. Missing tail is not an error."""
    try:
        (seller_fee,) = struct.unpack_from("<H", data, offset)
        offset += 2
        has_creators = data[offset]
        offset += 1
        if has_creators:
            (count,) = struct.unpack_from("<I", data, offset)
            offset += 4 + count * _CREATOR_SIZE
        offset += 1  # primary_sale_happened
        is_mutable = bool(data[offset])
    except (struct.error, IndexError):
        return 0, None
    return seller_fee, is_mutable

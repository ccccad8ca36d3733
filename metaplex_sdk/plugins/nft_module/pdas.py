"""Token Metadata PDAs. Seeds follow the program: [b"metadata", program id, mint, ...]."""

from __future__ import annotations

from solders.pubkey import Pubkey

from metaplex_sdk.core.pda import Pda, find_pda
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID

METADATA_SEED = b"metadata"
EDITION_SEED = b"edition"


def find_metadata_pda(mint: Pubkey, program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID) -> Pda:
    return find_pda([METADATA_SEED, bytes(program_id), bytes(mint)], program_id)


def find_master_edition_pda(mint: Pubkey, program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID) -> Pda:
    """Master edition and print edition accounts share this address."""
    return find_pda([METADATA_SEED, bytes(program_id), bytes(mint), EDITION_SEED], program_id)


# Each edition marker account tracks 248 print numbers.
EDITION_MARKER_BIT_SIZE = 248


def find_edition_marker_pda(
    master_mint: Pubkey, edition_number: int, program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID
) -> Pda:
    marker = str(edition_number // EDITION_MARKER_BIT_SIZE).encode("ascii")
    return find_pda([METADATA_SEED, bytes(program_id), bytes(master_mint), EDITION_SEED, marker], program_id)

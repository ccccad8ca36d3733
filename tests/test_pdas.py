"""PDA derivation: deterministic, and matching the addresses other tooling derives."""

from __future__ import annotations

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda

MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")
OWNER = Pubkey.from_string("9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka")


def test_metadata_pda_is_deterministic():
    assert find_metadata_pda(MINT) == find_metadata_pda(MINT)


def test_metadata_pda_uses_program_seeds():
    expected, bump = Pubkey.find_program_address(
        [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(MINT)], TOKEN_METADATA_PROGRAM_ID
    )
    pda = find_metadata_pda(MINT)
    assert pda.address == expected
    assert pda.bump == bump
    assert bytes(pda) == bytes(expected)
    assert str(pda) == str(expected)


def test_master_edition_pda_differs_from_metadata_pda():
    assert find_master_edition_pda(MINT).address != find_metadata_pda(MINT).address


def test_distinct_mints_give_distinct_pdas():
    assert find_metadata_pda(MINT).address != find_metadata_pda(OWNER).address


def test_associated_token_account_matches_spl():
    pda = find_associated_token_account_pda(MINT, OWNER)
    assert pda.address == get_associated_token_address(OWNER, MINT)

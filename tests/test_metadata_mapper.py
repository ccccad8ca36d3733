"""Metadata account decoding and mapping."""

from __future__ import annotations

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from conftest import master_edition_account_bytes, metadata_account_bytes
from metaplex_sdk.core.exceptions import UnexpectedAccountError
from metaplex_sdk.plugins.nft_module.accounts import parse_edition_account, parse_metadata_account
from metaplex_sdk.plugins.nft_module.models import (
    Creator,
    Metadata,
    UseMethod,
    Uses,
    to_data_v2,
    to_metadata,
    to_nft_edition,
    with_json,
)
from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID
from metaplex_sdk.rpc.client import UnparsedAccount


def _account(data: bytes, owner: Pubkey = TOKEN_METADATA_PROGRAM_ID) -> UnparsedAccount:
    return UnparsedAccount(address=Keypair().pubkey(), data=data, owner=owner, lamports=1)


def test_to_metadata_strips_padding_and_maps_fields():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    metadata = to_metadata(parse_metadata_account(_account(metadata_account_bytes(mint, authority, symbol="SN"))))

    assert isinstance(metadata, Metadata)
    assert metadata.name == "Some NFT"
    assert metadata.symbol == "SN"
    assert metadata.uri == "https://example.invalid/nft.json"
    assert metadata.seller_fee_basis_points == 200
    assert metadata.address == find_metadata_pda(mint).address
    assert metadata.mint_address == mint
    assert metadata.update_authority_address == authority
    assert metadata.creators == (Creator(address=authority, share=100, verified=True),)
    assert metadata.is_mutable is True
    assert metadata.primary_sale_happened is False
    assert metadata.edition_nonce == 254
    assert metadata.collection is None
    assert metadata.uses is None
    assert metadata.json is None
    assert metadata.json_loaded is False


def test_to_metadata_is_idempotent():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    decoded = parse_metadata_account(_account(metadata_account_bytes(mint, authority)))
    assert to_metadata(decoded) == to_metadata(decoded)


def test_to_metadata_maps_uses():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    data = metadata_account_bytes(mint, authority, uses={"use_method": 2, "remaining": 3, "total": 5})
    metadata = to_metadata(parse_metadata_account(_account(data)))
    assert metadata.uses == Uses(use_method=UseMethod.Single, remaining=3, total=5)


def test_metadata_without_creators_has_empty_tuple():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    data = metadata_account_bytes(mint, authority, creators=[])
    metadata = to_metadata(parse_metadata_account(_account(data)))
    assert metadata.creators == ()


def test_wrong_owner_rejected():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    with pytest.raises(UnexpectedAccountError):
        parse_metadata_account(_account(metadata_account_bytes(mint, authority), owner=TOKEN_PROGRAM_ID))


def test_wrong_key_rejected():
    with pytest.raises(UnexpectedAccountError) as excinfo:
        parse_metadata_account(_account(master_edition_account_bytes()))
    assert excinfo.value.expected_type == "Metadata"


def test_truncated_account_rejected():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    with pytest.raises(UnexpectedAccountError):
        parse_metadata_account(_account(metadata_account_bytes(mint, authority)[:80]))


def test_master_edition_maps_supply():
    mint = Keypair().pubkey()
    address = find_master_edition_pda(mint).address
    edition = to_nft_edition(address, parse_edition_account(_account(master_edition_account_bytes(3, 10))))
    assert edition.is_original
    assert edition.supply == 3
    assert edition.max_supply == 10
    assert edition.address == address


def test_master_edition_unlimited_supply_is_none():
    edition = to_nft_edition(
        Keypair().pubkey(), parse_edition_account(_account(master_edition_account_bytes(0, None)))
    )
    assert edition.max_supply is None


def test_unknown_use_method_is_kept_raw():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    data = metadata_account_bytes(mint, authority, uses={"use_method": 9, "remaining": 1, "total": 1})
    metadata = to_metadata(parse_metadata_account(_account(data)))
    assert metadata.uses.use_method == 9
    assert not isinstance(metadata.uses.use_method, UseMethod)
    assert to_data_v2(
        name=metadata.name,
        symbol=metadata.symbol,
        uri=metadata.uri,
        seller_fee_basis_points=metadata.seller_fee_basis_points,
        creators=metadata.creators,
        collection=metadata.collection,
        uses=metadata.uses,
    )["uses"] == {"use_method": 9, "remaining": 1, "total": 1}


def test_loaded_json_does_not_affect_equality():
    mint, authority = Keypair().pubkey(), Keypair().pubkey()
    metadata = to_metadata(parse_metadata_account(_account(metadata_account_bytes(mint, authority))))
    first = with_json(metadata, {"name": "a"})
    second = with_json(metadata, {"name": "b"})
    assert first == second
    assert hash(first) == hash(second)
    assert first != metadata

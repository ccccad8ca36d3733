"""
NFT module end to end against the in-memory connection: create, find, search
and update.
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import base58
import pytest
from solders.keypair import Keypair
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.transaction import Transaction
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from conftest import add_nft_accounts, metadata_account_bytes
from metaplex_sdk.core.amount import token
from metaplex_sdk.core.exceptions import (
    AccountNotFoundError,
    DuplicateInstructionKeyError,
    OperationCanceledError,
    ValidationError,
)
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module import CreateNftInput, CreateSftInput, Creator, Nft, Sft
from metaplex_sdk.plugins.nft_module.accounts import FIRST_CREATOR_OFFSET
from metaplex_sdk.plugins.nft_module.instructions import CREATE_METADATA_ACCOUNT_V3, CREATE_METADATA_ACCOUNT_V3_ARGS
from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda

INVALID_URI = "https://example.invalid/nft.json"


def _programs(raw: bytes) -> list:
    tx = Transaction.from_bytes(raw)
    keys = tx.message.account_keys
    return [keys[ix.program_id_index] for ix in tx.message.instructions]


def test_create_nft_then_find_by_mint(mx, connection, identity):
    uri = "https://example.invalid/minted.json"
    created = asyncio.run(mx.nfts().create("Minted NFT", uri, 200, symbol="MNT"))

    assert len(connection.sent) == 1
    assert _programs(connection.sent[0]) == [
        SYSTEM_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        ASSOCIATED_TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        TOKEN_METADATA_PROGRAM_ID,
        TOKEN_METADATA_PROGRAM_ID,
    ]
    assert created.metadata_address == find_metadata_pda(created.mint_address).address
    assert created.master_edition_address == find_master_edition_pda(created.mint_address).address
    assert created.token_address == find_associated_token_account_pda(created.mint_address, identity.pubkey()).address

    tx = Transaction.from_bytes(connection.sent[0])
    create_metadata_ix = tx.message.instructions[4]
    data = bytes(create_metadata_ix.data)
    assert data[0] == CREATE_METADATA_ACCOUNT_V3
    submitted = CREATE_METADATA_ACCOUNT_V3_ARGS.parse(data[1:]).data
    add_nft_accounts(
        connection,
        created.mint_address,
        identity.pubkey(),
        name=submitted.name,
        symbol=submitted.symbol,
        uri=submitted.uri,
        seller_fee_basis_points=submitted.seller_fee_basis_points,
        creators=[{"address": c.address, "verified": c.verified, "share": c.share} for c in submitted.creators],
    )
    nft = asyncio.run(mx.nfts().find_by_mint(created.mint_address))

    assert isinstance(nft, Nft)
    assert nft.address == created.mint_address
    assert nft.metadata_address == created.metadata_address
    assert nft.name == "Minted NFT"
    assert nft.symbol == "MNT"
    assert nft.uri == uri
    assert nft.seller_fee_basis_points == 200
    assert nft.update_authority_address == identity.pubkey()
    assert nft.creators == (Creator(address=identity.pubkey(), share=100, verified=True),)
    assert nft.json is None
    assert nft.metadata.json_loaded is True
    assert nft.mint.decimals == 0
    assert nft.edition.is_original
    assert nft.edition.max_supply == 0


def test_create_nft_instruction_keys(mx, connection):
    builder = asyncio.run(mx.nfts().builders().create(CreateNftInput("Some NFT", INVALID_URI, 200), mint_rent=1))
    assert builder.get_instruction_keys() == [
        "create_account",
        "initialize_mint",
        "create_associated_token_account",
        "mint_tokens",
        "create_metadata",
        "create_master_edition",
    ]
    assert connection.calls == []


def test_overridden_instruction_key_can_collide(mx):
    params = CreateNftInput(
        "Some NFT", INVALID_URI, 200, instruction_keys={"create_metadata": "create_master_edition"}
    )
    with pytest.raises(DuplicateInstructionKeyError):
        asyncio.run(mx.nfts().builders().create(params, mint_rent=1))


def test_create_sft_without_tokens(mx, connection):
    builder = asyncio.run(mx.nfts().builders().create_sft(CreateSftInput("Sft", INVALID_URI, 0, decimals=2)))
    assert builder.get_instruction_keys() == ["create_account", "initialize_mint", "create_metadata"]
    assert builder.get_context().token_address is None
    assert connection.calls == ["get_minimum_balance_for_rent_exemption"]


def test_create_sft_with_tokens_and_existing_mint(mx, identity):
    mint = Keypair().pubkey()
    params = CreateSftInput("Sft", INVALID_URI, 0, use_existing_mint=mint, token_amount=token(10))
    builder = asyncio.run(mx.nfts().builders().create_sft(params))
    assert builder.get_instruction_keys() == ["create_associated_token_account", "mint_tokens", "create_metadata"]
    context = builder.get_context()
    assert context.mint_address == mint
    assert context.token_address == find_associated_token_account_pda(mint, identity.pubkey()).address


def test_create_sft_operation(mx, connection):
    created = asyncio.run(mx.nfts().create_sft("Sft", INVALID_URI, 500, token_amount=token(3)))
    assert created.token_address is not None
    assert _programs(connection.sent[0])[-1] == TOKEN_METADATA_PROGRAM_ID


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "x" * 33},
        {"symbol": "TOOLONGSYMB"},
        {"seller_fee_basis_points": 10_001},
        {"creators": [Creator(Keypair().pubkey(), 50)]},
    ],
)
def test_invalid_create_input_fails_before_network(mx, connection, kwargs):
    params = {"name": "Some NFT", "uri": INVALID_URI, "seller_fee_basis_points": 200, **kwargs}
    with pytest.raises(ValidationError):
        asyncio.run(mx.nfts().create(**params))
    assert connection.calls == []


def test_find_by_mint_loads_json(mx, connection, identity, json_documents):
    mint = Keypair().pubkey()
    uri = "https://example.com/nft.json"
    json_documents[uri] = {"name": "Some NFT", "image": "https://example.com/nft.png"}
    add_nft_accounts(connection, mint, identity.pubkey(), uri=uri)

    nft = asyncio.run(mx.nfts().find_by_mint(mint))
    assert nft.json == {"name": "Some NFT", "image": "https://example.com/nft.png"}

    skipped = asyncio.run(mx.nfts().find_by_mint(mint, load_json_metadata=False))
    assert skipped.json is None
    assert skipped.metadata.json_loaded is False


def test_find_by_mint_without_edition_is_sft(mx, connection, identity):
    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey(), edition=False)
    asset = asyncio.run(mx.nfts().find_by_mint(mint, load_json_metadata=False))
    assert type(asset) is Sft
    assert asset.model == "sft"


def test_find_by_mint_with_token_owner(mx, connection, identity):
    from conftest import token_account_bytes

    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey())
    ata = find_associated_token_account_pda(mint, identity.pubkey()).address
    connection.add_account(ata, token_account_bytes(mint, identity.pubkey()), TOKEN_PROGRAM_ID)

    nft = asyncio.run(mx.nfts().find_by_mint(mint, token_owner=identity.pubkey(), load_json_metadata=False))
    assert nft.token.address == ata
    assert nft.token.amount == 1


def test_find_by_mint_missing_metadata(mx):
    with pytest.raises(AccountNotFoundError) as excinfo:
        asyncio.run(mx.nfts().find_by_mint(Keypair().pubkey()))
    assert excinfo.value.account_type == "Metadata"


def test_find_by_mint_canceled(mx, connection):
    scope = CancellationScope()
    scope.cancel()
    with pytest.raises(OperationCanceledError):
        asyncio.run(mx.nfts().find_by_mint(Keypair().pubkey(), scope=scope))
    assert connection.calls == []


def test_find_all_by_mint_list(mx, connection, identity):
    known, missing = Keypair().pubkey(), Keypair().pubkey()
    add_nft_accounts(connection, known, identity.pubkey())
    found = asyncio.run(mx.nfts().find_all_by_mint_list([known, missing]))
    assert found[0].mint_address == known
    assert found[1] is None


def test_find_all_by_creator(mx, connection, identity):
    mint = Keypair().pubkey()
    connection.program_accounts = [
        SimpleNamespace(
            pubkey=find_metadata_pda(mint).address,
            account=SimpleNamespace(
                data=metadata_account_bytes(mint, identity.pubkey()),
                owner=TOKEN_METADATA_PROGRAM_ID,
                lamports=1,
                executable=False,
            ),
        )
    ]
    found = asyncio.run(mx.nfts().find_all_by_creator(identity.pubkey()))

    assert [m.mint_address for m in found] == [mint]
    key_filter, creator_filter = connection.gpa_filters
    assert key_filter.offset == 0
    assert key_filter.bytes == base58.b58encode(bytes([4])).decode()
    assert creator_filter.offset == FIRST_CREATOR_OFFSET == 326
    assert creator_filter.bytes == str(identity.pubkey())


def test_find_all_by_creator_position_bounds(mx):
    with pytest.raises(ValidationError):
        asyncio.run(mx.nfts().find_all_by_creator(Keypair().pubkey(), position=6))


def test_find_all_by_update_authority(mx, connection, identity):
    connection.program_accounts = []
    assert asyncio.run(mx.nfts().find_all_by_update_authority(identity.pubkey())) == []
    assert connection.gpa_filters[1].offset == 1


def test_update_nft(mx, connection, identity):
    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey())
    nft = asyncio.run(mx.nfts().find_by_mint(mint, load_json_metadata=False))

    output = asyncio.run(mx.nfts().update(nft, name="Renamed", primary_sale_happened=True))
    assert output.response.confirmation_status == "confirmed"
    tx = Transaction.from_bytes(connection.sent[-1])
    (ix,) = tx.message.instructions
    assert bytes(ix.data)[0] == 15
    assert b"Renamed" in bytes(ix.data)


def test_update_nft_requires_a_change(mx, connection, identity):
    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey())
    nft = asyncio.run(mx.nfts().find_by_mint(mint, load_json_metadata=False))
    with pytest.raises(ValidationError):
        asyncio.run(mx.nfts().update(nft))
    assert connection.sent == []


def test_find_by_mint_with_malformed_uri(mx, connection, identity):
    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey(), uri="http://[::1/nft.json")
    nft = asyncio.run(mx.nfts().find_by_mint(mint))
    assert nft.uri == "http://[::1/nft.json"
    assert nft.json is None
    assert nft.metadata.json_loaded is True


def test_find_by_metadata(mx, connection, identity):
    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey(), name="By Metadata")
    nft = asyncio.run(mx.nfts().find_by_metadata(find_metadata_pda(mint).address, load_json_metadata=False))
    assert isinstance(nft, Nft)
    assert nft.address == mint
    assert nft.name == "By Metadata"


def test_find_by_metadata_missing_account(mx):
    with pytest.raises(AccountNotFoundError) as excinfo:
        asyncio.run(mx.nfts().find_by_metadata(Keypair().pubkey()))
    assert excinfo.value.account_type == "Metadata"


def test_find_by_token_outside_associated_account(mx, connection, identity):
    from conftest import token_account_bytes

    mint = Keypair().pubkey()
    add_nft_accounts(connection, mint, identity.pubkey())
    token_address = Keypair().pubkey()
    connection.add_account(token_address, token_account_bytes(mint, identity.pubkey()), TOKEN_PROGRAM_ID)

    nft = asyncio.run(mx.nfts().find_by_token(token_address, load_json_metadata=False))
    assert nft.address == mint
    assert nft.token.address == token_address
    assert nft.token.owner_address == identity.pubkey()


def test_find_by_token_missing_account(mx):
    with pytest.raises(AccountNotFoundError) as excinfo:
        asyncio.run(mx.nfts().find_by_token(Keypair().pubkey()))
    assert excinfo.value.account_type == "Token"


def test_find_all_by_owner(mx, connection, identity):
    from conftest import token_account_bytes

    held, unlisted = Keypair().pubkey(), Keypair().pubkey()
    add_nft_accounts(connection, held, identity.pubkey())
    connection.program_accounts = [
        SimpleNamespace(
            pubkey=Keypair().pubkey(),
            account=SimpleNamespace(
                data=token_account_bytes(mint, identity.pubkey()),
                owner=TOKEN_PROGRAM_ID,
                lamports=1,
                executable=False,
            ),
        )
        for mint in (held, unlisted)
    ]

    found = asyncio.run(mx.nfts().find_all_by_owner(identity.pubkey()))

    assert [m.mint_address for m in found] == [held]
    size_filter, owner_filter, amount_filter = connection.gpa_filters
    assert size_filter == 165
    assert owner_filter.offset == 32
    assert owner_filter.bytes == str(identity.pubkey())
    assert amount_filter.offset == 64
    assert amount_filter.bytes == base58.b58encode((1).to_bytes(8, "little")).decode()


def test_find_all_by_owner_without_tokens(mx, connection, identity):
    assert asyncio.run(mx.nfts().find_all_by_owner(identity.pubkey())) == []
    assert "get_multiple_accounts" not in connection.calls

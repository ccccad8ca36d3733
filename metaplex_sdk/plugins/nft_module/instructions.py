"""
Token Metadata instruction encoders.

Each builder returns a solders Instruction: a one-byte discriminant followed by
the borsh-encoded arguments, with accounts in the order the program reads
them. Optional trailing accounts (rent sysvar) are omitted where the program
allows it.
"""

from __future__ import annotations

from typing import Any

from borsh_construct import U8, U64, Bool, CStruct, Option
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import RENT
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from metaplex_sdk.core.layouts import PUBLIC_KEY
from metaplex_sdk.plugins.nft_module.accounts import DATA_V2
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID

MINT_NEW_EDITION_FROM_MASTER_EDITION_VIA_TOKEN = 11
UPDATE_METADATA_ACCOUNT_V2 = 15
CREATE_MASTER_EDITION_V3 = 17
UTILIZE = 19
CREATE_METADATA_ACCOUNT_V3 = 33

COLLECTION_DETAILS = CStruct(
    "kind" / U8,
    "size" / U64,
)

CREATE_METADATA_ACCOUNT_V3_ARGS = CStruct(
    "data" / DATA_V2,
    "is_mutable" / Bool,
    "collection_details" / Option(COLLECTION_DETAILS),
)

CREATE_MASTER_EDITION_V3_ARGS = CStruct(
    "max_supply" / Option(U64),
)

UPDATE_METADATA_ACCOUNT_V2_ARGS = CStruct(
    "data" / Option(DATA_V2),
    "update_authority" / Option(PUBLIC_KEY),
    "primary_sale_happened" / Option(Bool),
    "is_mutable" / Option(Bool),
)

MINT_NEW_EDITION_ARGS = CStruct(
    "edition" / U64,
)

UTILIZE_ARGS = CStruct(
    "number_of_uses" / U64,
)


def _encode(discriminant: int, layout: Any, args: dict[str, Any]) -> bytes:
    return bytes([discriminant]) + layout.build(args)


def create_metadata_account_v3_instruction(
    *,
    metadata: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    data: dict[str, Any],
    is_mutable: bool = True,
    collection_size: int | None = None,
    update_authority_is_signer: bool = True,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """data is a DataV2 dict; collection_size marks the new asset as a sized collection parent."""
    args = {
        "data": data,
        "is_mutable": is_mutable,
        "collection_details": None if collection_size is None else {"kind": 0, "size": collection_size},
    }
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(update_authority, is_signer=update_authority_is_signer, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(program_id, _encode(CREATE_METADATA_ACCOUNT_V3, CREATE_METADATA_ACCOUNT_V3_ARGS, args), accounts)


def create_master_edition_v3_instruction(
    *,
    edition: Pubkey,
    mint: Pubkey,
    update_authority: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    metadata: Pubkey,
    max_supply: int | None,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """max_supply=None allows unlimited prints; 0 makes the edition unique."""
    accounts = [
        AccountMeta(edition, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(update_authority, is_signer=True, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(token_program, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = _encode(CREATE_MASTER_EDITION_V3, CREATE_MASTER_EDITION_V3_ARGS, {"max_supply": max_supply})
    return Instruction(program_id, data, accounts)


def update_metadata_account_v2_instruction(
    *,
    metadata: Pubkey,
    update_authority: Pubkey,
    data: dict[str, Any] | None = None,
    new_update_authority: Pubkey | None = None,
    primary_sale_happened: bool | None = None,
    is_mutable: bool | None = None,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    args = {
        "data": data,
        "update_authority": new_update_authority,
        "primary_sale_happened": primary_sale_happened,
        "is_mutable": is_mutable,
    }
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(update_authority, is_signer=True, is_writable=False),
    ]
    return Instruction(program_id, _encode(UPDATE_METADATA_ACCOUNT_V2, UPDATE_METADATA_ACCOUNT_V2_ARGS, args), accounts)


def mint_new_edition_from_master_edition_via_token_instruction(
    *,
    new_metadata: Pubkey,
    new_edition: Pubkey,
    master_edition: Pubkey,
    new_mint: Pubkey,
    edition_marker: Pubkey,
    new_mint_authority: Pubkey,
    payer: Pubkey,
    token_account_owner: Pubkey,
    token_account: Pubkey,
    new_metadata_update_authority: Pubkey,
    metadata: Pubkey,
    edition: int,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """Print edition number `edition` of the master edition held in token_account."""
    accounts = [
        AccountMeta(new_metadata, is_signer=False, is_writable=True),
        AccountMeta(new_edition, is_signer=False, is_writable=True),
        AccountMeta(master_edition, is_signer=False, is_writable=True),
        AccountMeta(new_mint, is_signer=False, is_writable=True),
        AccountMeta(edition_marker, is_signer=False, is_writable=True),
        AccountMeta(new_mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(token_account_owner, is_signer=True, is_writable=False),
        AccountMeta(token_account, is_signer=False, is_writable=False),
        AccountMeta(new_metadata_update_authority, is_signer=False, is_writable=False),
        AccountMeta(metadata, is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    data = _encode(MINT_NEW_EDITION_FROM_MASTER_EDITION_VIA_TOKEN, MINT_NEW_EDITION_ARGS, {"edition": edition})
    return Instruction(program_id, data, accounts)


def utilize_instruction(
    *,
    metadata: Pubkey,
    token_account: Pubkey,
    mint: Pubkey,
    use_authority: Pubkey,
    owner: Pubkey,
    number_of_uses: int,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    program_id: Pubkey = TOKEN_METADATA_PROGRAM_ID,
) -> Instruction:
    """Consume uses of an asset. The program reads the rent sysvar here, so it is always passed."""
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(token_account, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=True),
        AccountMeta(use_authority, is_signer=True, is_writable=True),
        AccountMeta(owner, is_signer=False, is_writable=False),
        AccountMeta(token_program, is_signer=False, is_writable=False),
        AccountMeta(ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(RENT, is_signer=False, is_writable=False),
    ]
    data = _encode(UTILIZE, UTILIZE_ARGS, {"number_of_uses": number_of_uses})
    return Instruction(program_id, data, accounts)

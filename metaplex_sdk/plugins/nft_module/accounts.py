"""
Token Metadata account layouts (borsh) and checked decoding.

Metadata accounts are allocated at a fixed maximum size; name, symbol and uri
are NUL-padded on chain and any bytes after the last decoded field are
ignored. Both decoders check the owning program and the leading Key byte
before parsing.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from borsh_construct import U8, U16, U64, Bool, CStruct, Option, String, Vec
from construct import ConstructError

from metaplex_sdk.core.exceptions import UnexpectedAccountError
from metaplex_sdk.core.layouts import PUBLIC_KEY
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID
from metaplex_sdk.rpc.client import UnparsedAccount


class Key(IntEnum):
    Uninitialized = 0
    EditionV1 = 1
    MasterEditionV1 = 2
    ReservationListV1 = 3
    MetadataV1 = 4
    ReservationListV2 = 5
    MasterEditionV2 = 6
    EditionMarker = 7


MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200
MAX_CREATOR_LIMIT = 5
MAX_CREATOR_LEN = 32 + 1 + 1

CREATOR = CStruct(
    "address" / PUBLIC_KEY,
    "verified" / Bool,
    "share" / U8,
)

COLLECTION = CStruct(
    "verified" / Bool,
    "key" / PUBLIC_KEY,
)

USES = CStruct(
    "use_method" / U8,
    "remaining" / U64,
    "total" / U64,
)

DATA = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CREATOR)),
)

DATA_V2 = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CREATOR)),
    "collection" / Option(COLLECTION),
    "uses" / Option(USES),
)

METADATA_ACCOUNT = CStruct(
    "key" / U8,
    "update_authority" / PUBLIC_KEY,
    "mint" / PUBLIC_KEY,
    "data" / DATA,
    "primary_sale_happened" / Bool,
    "is_mutable" / Bool,
    "edition_nonce" / Option(U8),
    "token_standard" / Option(U8),
    "collection" / Option(COLLECTION),
    "uses" / Option(USES),
)

MASTER_EDITION_ACCOUNT = CStruct(
    "key" / U8,
    "supply" / U64,
    "max_supply" / Option(U64),
)

EDITION_ACCOUNT = CStruct(
    "key" / U8,
    "parent" / PUBLIC_KEY,
    "edition" / U64,
)

# Byte offsets used by account search filters.
UPDATE_AUTHORITY_OFFSET = 1
MINT_OFFSET = 33
FIRST_CREATOR_OFFSET = 1 + 32 + 32 + (4 + MAX_NAME_LENGTH) + (4 + MAX_SYMBOL_LENGTH) + (4 + MAX_URI_LENGTH) + 2 + 1 + 4


def _check_account(account: UnparsedAccount, expected_type: str, keys: tuple[Key, ...]) -> None:
    if account.owner != TOKEN_METADATA_PROGRAM_ID:
        raise UnexpectedAccountError(account.address, expected_type, f"owned by {account.owner}")
    if not account.data or account.data[0] not in keys:
        found = account.data[0] if account.data else None
        raise UnexpectedAccountError(account.address, expected_type, f"unexpected key {found}")


def _parse(layout: Any, account: UnparsedAccount, expected_type: str) -> Any:
    try:
        return layout.parse(account.data)
    except ConstructError as e:
        raise UnexpectedAccountError(account.address, expected_type, f"could not decode: {e}") from e


def parse_metadata_account(account: UnparsedAccount) -> Any:
    _check_account(account, "Metadata", (Key.MetadataV1,))
    return _parse(METADATA_ACCOUNT, account, "Metadata")


def is_master_edition_account(account: UnparsedAccount) -> bool:
    return bool(account.data) and account.data[0] in (Key.MasterEditionV1, Key.MasterEditionV2)


def parse_edition_account(account: UnparsedAccount) -> Any:
    """Decode a master or print edition; the Key byte picks the layout."""
    _check_account(account, "Edition", (Key.MasterEditionV1, Key.MasterEditionV2, Key.EditionV1))
    if is_master_edition_account(account):
        # MasterEditionV1 shares the V2 prefix; its trailing printing mints are ignored.
        return _parse(MASTER_EDITION_ACCOUNT, account, "MasterEdition")
    return _parse(EDITION_ACCOUNT, account, "Edition")

"""
SPL Token account layouts (Mint, Token) and checked decoding.

The Token program uses a fixed C-style layout, not borsh: optional keys are a
u32 tag followed by 32 bytes that are zero when the tag is 0.
"""

from __future__ import annotations

from typing import Any

from construct import Flag, Int8ul, Int32ul, Int64ul, Struct
from spl.token.constants import ACCOUNT_LEN, MINT_LEN, TOKEN_PROGRAM_ID

from metaplex_sdk.core.exceptions import UnexpectedAccountError
from metaplex_sdk.core.layouts import PUBLIC_KEY
from metaplex_sdk.rpc.client import UnparsedAccount

MINT_LAYOUT = Struct(
    "mint_authority_option" / Int32ul,
    "mint_authority" / PUBLIC_KEY,
    "supply" / Int64ul,
    "decimals" / Int8ul,
    "is_initialized" / Flag,
    "freeze_authority_option" / Int32ul,
    "freeze_authority" / PUBLIC_KEY,
)

TOKEN_LAYOUT = Struct(
    "mint" / PUBLIC_KEY,
    "owner" / PUBLIC_KEY,
    "amount" / Int64ul,
    "delegate_option" / Int32ul,
    "delegate" / PUBLIC_KEY,
    "state" / Int8ul,
    "is_native_option" / Int32ul,
    "is_native" / Int64ul,
    "delegated_amount" / Int64ul,
    "close_authority_option" / Int32ul,
    "close_authority" / PUBLIC_KEY,
)


def _check_owner_and_size(account: UnparsedAccount, expected_type: str, size: int) -> None:
    if account.owner != TOKEN_PROGRAM_ID:
        raise UnexpectedAccountError(account.address, expected_type, f"owned by {account.owner}")
    if len(account.data) < size:
        raise UnexpectedAccountError(
            account.address, expected_type, f"data is {len(account.data)} bytes, expected {size}"
        )


def parse_mint_account(account: UnparsedAccount) -> Any:
    _check_owner_and_size(account, "Mint", MINT_LEN)
    return MINT_LAYOUT.parse(account.data[:MINT_LEN])


def parse_token_account(account: UnparsedAccount) -> Any:
    _check_owner_and_size(account, "Token", ACCOUNT_LEN)
    return TOKEN_LAYOUT.parse(account.data[:ACCOUNT_LEN])

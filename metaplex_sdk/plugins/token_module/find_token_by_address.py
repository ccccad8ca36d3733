"""FindTokenByAddressOperation: fetch and decode a token account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import AccountNotFoundError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.token_module.accounts import parse_token_account
from metaplex_sdk.plugins.token_module.models import Token, to_token

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_TOKEN_BY_ADDRESS_KEY = "FindTokenByAddressOperation"
find_token_by_address_operation = use_operation(FIND_TOKEN_BY_ADDRESS_KEY)


@dataclass(frozen=True)
class FindTokenByAddressInput:
    address: Pubkey
    commitment: str | None = None


async def find_token_by_address_handler(
    operation: Operation[FindTokenByAddressInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Token:
    address = operation.input.address
    account = await metaplex.rpc().get_account(address, operation.input.commitment)
    if account is None:
        raise AccountNotFoundError(address, "Token")
    return to_token(address, parse_token_account(account))

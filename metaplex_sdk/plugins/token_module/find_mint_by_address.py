"""FindMintByAddressOperation: fetch and decode a Mint account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import AccountNotFoundError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.token_module.accounts import parse_mint_account
from metaplex_sdk.plugins.token_module.models import Mint, to_mint

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_MINT_BY_ADDRESS_KEY = "FindMintByAddressOperation"
find_mint_by_address_operation = use_operation(FIND_MINT_BY_ADDRESS_KEY)


@dataclass(frozen=True)
class FindMintByAddressInput:
    address: Pubkey
    commitment: str | None = None


async def find_mint_by_address_handler(
    operation: Operation[FindMintByAddressInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Mint:
    address = operation.input.address
    account = await metaplex.rpc().get_account(address, operation.input.commitment)
    if account is None:
        raise AccountNotFoundError(address, "Mint")
    return to_mint(address, parse_mint_account(account))

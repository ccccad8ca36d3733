"""
FindNftsByOwnerOperation: Metadata of every asset a wallet holds exactly one token of.

Token accounts are found with get_program_accounts on the Token program
(owner and amount filters); their mints are then batch-loaded like
FindNftsByMintListOperation, dropping mints without valid metadata.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.find_nfts_by_mint_list import (
    FindNftsByMintListInput,
    find_nfts_by_mint_list_operation,
)
from metaplex_sdk.plugins.nft_module.models import Metadata
from metaplex_sdk.plugins.token_module.accounts import parse_token_account
from metaplex_sdk.plugins.token_module.program import TOKEN_PROGRAM_NAME

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_NFTS_BY_OWNER_KEY = "FindNftsByOwnerOperation"
find_nfts_by_owner_operation = use_operation(FIND_NFTS_BY_OWNER_KEY)


@dataclass(frozen=True)
class FindNftsByOwnerInput:
    owner: Pubkey
    commitment: str | None = None


async def find_nfts_by_owner_handler(
    operation: Operation[FindNftsByOwnerInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> list[Metadata]:
    params = operation.input
    program = metaplex.programs().get(TOKEN_PROGRAM_NAME)
    accounts = await program.gpa_resolver(metaplex).where_owner(params.owner).where_amount(1).get()
    scope.throw_if_canceled()
    mints = [parse_token_account(account).mint for account in accounts]
    if not mints:
        return []
    found = await metaplex.run(
        find_nfts_by_mint_list_operation(FindNftsByMintListInput(mints=mints, commitment=params.commitment)),
        scope,
    )
    return [m for m in found if m is not None]

"""FindNftsByUpdateAuthorityOperation: every Metadata a given key can update."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.find_nfts_by_mint_list import metadata_or_none
from metaplex_sdk.plugins.nft_module.models import Metadata
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_NAME

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_NFTS_BY_UPDATE_AUTHORITY_KEY = "FindNftsByUpdateAuthorityOperation"
find_nfts_by_update_authority_operation = use_operation(FIND_NFTS_BY_UPDATE_AUTHORITY_KEY)


@dataclass(frozen=True)
class FindNftsByUpdateAuthorityInput:
    update_authority: Pubkey


async def find_nfts_by_update_authority_handler(
    operation: Operation[FindNftsByUpdateAuthorityInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> list[Metadata]:
    program = metaplex.programs().get(TOKEN_METADATA_PROGRAM_NAME)
    gpa = program.gpa_resolver(metaplex).where_update_authority(operation.input.update_authority)
    accounts = await gpa.get()
    scope.throw_if_canceled()
    return [m for m in map(metadata_or_none, accounts) if m is not None]

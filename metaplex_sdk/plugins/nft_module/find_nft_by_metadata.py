"""FindNftByMetadataOperation: resolve a Metadata address to its mint, then load by mint."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import AccountNotFoundError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.accounts import parse_metadata_account
from metaplex_sdk.plugins.nft_module.find_nft_by_mint import FindNftByMintInput, find_nft_by_mint_operation
from metaplex_sdk.plugins.nft_module.models import Nft, Sft

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_NFT_BY_METADATA_KEY = "FindNftByMetadataOperation"
find_nft_by_metadata_operation = use_operation(FIND_NFT_BY_METADATA_KEY)


@dataclass(frozen=True)
class FindNftByMetadataInput:
    metadata_address: Pubkey
    token_address: Pubkey | None = None
    token_owner: Pubkey | None = None
    load_json_metadata: bool = True
    commitment: str | None = None


async def find_nft_by_metadata_handler(
    operation: Operation[FindNftByMetadataInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Nft | Sft:
    params = operation.input
    account = await metaplex.rpc().get_account(params.metadata_address, params.commitment)
    scope.throw_if_canceled()
    if account is None:
        raise AccountNotFoundError(params.metadata_address, "Metadata")
    decoded = parse_metadata_account(account)
    return await metaplex.run(
        find_nft_by_mint_operation(
            FindNftByMintInput(
                mint_address=decoded.mint,
                token_address=params.token_address,
                token_owner=params.token_owner,
                load_json_metadata=params.load_json_metadata,
                commitment=params.commitment,
            )
        ),
        scope,
    )

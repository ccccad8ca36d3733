"""FindNftByTokenOperation: load an asset from a token account holding it; the token is attached."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import AccountNotFoundError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.find_nft_by_mint import FindNftByMintInput, find_nft_by_mint_operation
from metaplex_sdk.plugins.nft_module.models import Nft, Sft
from metaplex_sdk.plugins.token_module.accounts import parse_token_account

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_NFT_BY_TOKEN_KEY = "FindNftByTokenOperation"
find_nft_by_token_operation = use_operation(FIND_NFT_BY_TOKEN_KEY)


@dataclass(frozen=True)
class FindNftByTokenInput:
    token_address: Pubkey
    load_json_metadata: bool = True
    commitment: str | None = None


async def find_nft_by_token_handler(
    operation: Operation[FindNftByTokenInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Nft | Sft:
    params = operation.input
    account = await metaplex.rpc().get_account(params.token_address, params.commitment)
    scope.throw_if_canceled()
    if account is None:
        raise AccountNotFoundError(params.token_address, "Token")
    decoded = parse_token_account(account)
    return await metaplex.run(
        find_nft_by_mint_operation(
            FindNftByMintInput(
                mint_address=decoded.mint,
                token_address=params.token_address,
                load_json_metadata=params.load_json_metadata,
                commitment=params.commitment,
            )
        ),
        scope,
    )

"""
FindNftByMintOperation: load an Nft or Sft from its mint address.

Metadata, mint and edition (plus the token account, when asked for) are read
in a single getMultipleAccounts call. The result is an Nft when an edition
account exists, an Sft otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import AccountNotFoundError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.accounts import parse_edition_account, parse_metadata_account
from metaplex_sdk.plugins.nft_module.load_metadata import LoadMetadataInput, load_metadata_operation
from metaplex_sdk.plugins.nft_module.models import Nft, Sft, to_metadata, to_nft, to_nft_edition, to_sft
from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.token_module.accounts import parse_mint_account, parse_token_account
from metaplex_sdk.plugins.token_module.models import to_mint, to_token
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

FIND_NFT_BY_MINT_KEY = "FindNftByMintOperation"
find_nft_by_mint_operation = use_operation(FIND_NFT_BY_MINT_KEY)


@dataclass(frozen=True)
class FindNftByMintInput:
    mint_address: Pubkey
    token_address: Pubkey | None = None
    token_owner: Pubkey | None = None
    load_json_metadata: bool = True
    commitment: str | None = None


async def find_nft_by_mint_handler(
    operation: Operation[FindNftByMintInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Nft | Sft:
    params = operation.input
    mint_address = params.mint_address
    metadata_address = find_metadata_pda(mint_address).address
    edition_address = find_master_edition_pda(mint_address).address
    token_address = params.token_address
    if token_address is None and params.token_owner is not None:
        token_address = find_associated_token_account_pda(mint_address, params.token_owner).address

    addresses = [metadata_address, mint_address, edition_address]
    if token_address is not None:
        addresses.append(token_address)
    accounts = await metaplex.rpc().get_multiple_accounts(addresses, params.commitment)
    scope.throw_if_canceled()

    metadata_account, mint_account, edition_account = accounts[:3]
    if metadata_account is None:
        raise AccountNotFoundError(metadata_address, "Metadata")
    if mint_account is None:
        raise AccountNotFoundError(mint_address, "Mint")

    metadata = to_metadata(parse_metadata_account(metadata_account))
    mint = to_mint(mint_address, parse_mint_account(mint_account))
    token = None
    if token_address is not None:
        token_account = accounts[3]
        if token_account is None:
            raise AccountNotFoundError(token_address, "Token")
        token = to_token(token_address, parse_token_account(token_account))

    if params.load_json_metadata:
        metadata = await metaplex.run(load_metadata_operation(LoadMetadataInput(metadata)), scope)

    if edition_account is None:
        return to_sft(metadata, mint, token)
    edition = to_nft_edition(edition_address, parse_edition_account(edition_account))
    return to_nft(metadata, mint, edition, token)

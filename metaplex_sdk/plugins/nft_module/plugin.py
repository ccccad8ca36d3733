"""NFT module plugin: registers the Token Metadata program, the NFT operations and mx.nfts()."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metaplex_sdk.plugins.nft_module.client import NftClient
from metaplex_sdk.plugins.nft_module.create_nft import create_nft_handler, create_nft_operation
from metaplex_sdk.plugins.nft_module.create_sft import create_sft_handler, create_sft_operation
from metaplex_sdk.plugins.nft_module.find_nft_by_metadata import (
    find_nft_by_metadata_handler,
    find_nft_by_metadata_operation,
)
from metaplex_sdk.plugins.nft_module.find_nft_by_mint import find_nft_by_mint_handler, find_nft_by_mint_operation
from metaplex_sdk.plugins.nft_module.find_nft_by_token import find_nft_by_token_handler, find_nft_by_token_operation
from metaplex_sdk.plugins.nft_module.find_nfts_by_creator import (
    find_nfts_by_creator_handler,
    find_nfts_by_creator_operation,
)
from metaplex_sdk.plugins.nft_module.find_nfts_by_mint_list import (
    find_nfts_by_mint_list_handler,
    find_nfts_by_mint_list_operation,
)
from metaplex_sdk.plugins.nft_module.find_nfts_by_owner import find_nfts_by_owner_handler, find_nfts_by_owner_operation
from metaplex_sdk.plugins.nft_module.find_nfts_by_update_authority import (
    find_nfts_by_update_authority_handler,
    find_nfts_by_update_authority_operation,
)
from metaplex_sdk.plugins.nft_module.load_metadata import load_metadata_handler, load_metadata_operation
from metaplex_sdk.plugins.nft_module.print_new_edition import print_new_edition_handler, print_new_edition_operation
from metaplex_sdk.plugins.nft_module.program import TokenMetadataProgram
from metaplex_sdk.plugins.nft_module.update_nft import update_nft_handler, update_nft_operation
from metaplex_sdk.plugins.nft_module.use_nft import use_nft_handler, use_nft_operation

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex


class NftModule:
    def install(self, metaplex: Metaplex) -> None:
        metaplex.programs().register(TokenMetadataProgram)

        op = metaplex.operations()
        op.register(create_nft_operation, create_nft_handler)
        op.register(create_sft_operation, create_sft_handler)
        op.register(find_nft_by_metadata_operation, find_nft_by_metadata_handler)
        op.register(find_nft_by_mint_operation, find_nft_by_mint_handler)
        op.register(find_nft_by_token_operation, find_nft_by_token_handler)
        op.register(find_nfts_by_mint_list_operation, find_nfts_by_mint_list_handler)
        op.register(find_nfts_by_owner_operation, find_nfts_by_owner_handler)
        op.register(find_nfts_by_creator_operation, find_nfts_by_creator_handler)
        op.register(find_nfts_by_update_authority_operation, find_nfts_by_update_authority_handler)
        op.register(load_metadata_operation, load_metadata_handler)
        op.register(print_new_edition_operation, print_new_edition_handler)
        op.register(update_nft_operation, update_nft_handler)
        op.register(use_nft_operation, use_nft_handler)

        metaplex.register_client("nfts", NftClient)


def nft_module() -> NftModule:
    return NftModule()

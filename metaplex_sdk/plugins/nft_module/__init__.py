"""NFTs and SFTs on the Token Metadata program."""

from metaplex_sdk.plugins.nft_module.client import NftBuildersClient, NftClient
from metaplex_sdk.plugins.nft_module.create_nft import CreateNftInput, CreateNftOutput, create_nft_builder
from metaplex_sdk.plugins.nft_module.create_sft import CreateSftInput, CreateSftOutput, create_sft_builder
from metaplex_sdk.plugins.nft_module.gpa import TokenMetadataGpaBuilder
from metaplex_sdk.plugins.nft_module.models import (
    Collection,
    Creator,
    Metadata,
    Nft,
    NftEdition,
    Sft,
    TokenStandard,
    UseMethod,
    Uses,
    to_metadata,
    to_nft,
    to_nft_edition,
    to_sft,
)
from metaplex_sdk.plugins.nft_module.pdas import find_edition_marker_pda, find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.nft_module.plugin import NftModule, nft_module
from metaplex_sdk.plugins.nft_module.print_new_edition import (
    PrintNewEditionInput,
    PrintNewEditionOutput,
    print_new_edition_builder,
)
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID, TokenMetadataProgram
from metaplex_sdk.plugins.nft_module.use_nft import UseNftInput, UseNftOutput, use_nft_builder

__all__ = [
    "Collection",
    "CreateNftInput",
    "CreateNftOutput",
    "CreateSftInput",
    "CreateSftOutput",
    "Creator",
    "Metadata",
    "Nft",
    "NftBuildersClient",
    "NftClient",
    "NftEdition",
    "NftModule",
    "PrintNewEditionInput",
    "PrintNewEditionOutput",
    "Sft",
    "TOKEN_METADATA_PROGRAM_ID",
    "TokenMetadataGpaBuilder",
    "TokenMetadataProgram",
    "TokenStandard",
    "UseMethod",
    "UseNftInput",
    "UseNftOutput",
    "Uses",
    "create_nft_builder",
    "create_sft_builder",
    "find_edition_marker_pda",
    "find_master_edition_pda",
    "find_metadata_pda",
    "nft_module",
    "print_new_edition_builder",
    "to_metadata",
    "to_nft",
    "to_nft_edition",
    "to_sft",
    "use_nft_builder",
]

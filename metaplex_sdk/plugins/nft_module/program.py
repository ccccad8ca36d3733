"""Token Metadata program registration: address, error codes, account search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.program import Program, custom_error_table, make_error_resolver

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex
    from metaplex_sdk.plugins.nft_module.gpa import TokenMetadataGpaBuilder

TOKEN_METADATA_PROGRAM_NAME = "TokenMetadataProgram"
TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

# mpl-token-metadata MetadataError discriminants (first block; later codes fall through unresolved).
TOKEN_METADATA_ERRORS = custom_error_table(
    [
        (0, "InstructionUnpackError", "Failed to unpack instruction data"),
        (1, "InstructionPackError", "Failed to pack instruction data"),
        (2, "NotRentExempt", "Lamport balance below rent-exempt threshold"),
        (3, "AlreadyInitialized", "Already initialized"),
        (4, "Uninitialized", "Uninitialized"),
        (5, "InvalidMetadataKey", "Metadata's key must match seed of ['metadata', program id, mint] provided"),
        (6, "InvalidEditionKey", "Edition's key must match seed of ['metadata', program id, name, 'edition'] provided"),
        (7, "UpdateAuthorityIncorrect", "Update Authority given does not match"),
        (8, "UpdateAuthorityIsNotSigner", "Update Authority needs to be signer to update metadata"),
        (9, "NotMintAuthority", "You must be the mint authority and signer on this transaction"),
        (10, "InvalidMintAuthority", "Mint authority provided does not match the authority on the mint"),
        (11, "NameTooLong", "Name too long"),
        (12, "SymbolTooLong", "Symbol too long"),
        (13, "UriTooLong", "URI too long"),
        (14, "UpdateAuthorityMustBeEqualToMetadataAuthorityAndSigner", "Update authority must be equivalent to the metadata's authority and also signer of this transaction"),
        (15, "MintMismatch", "Mint given does not match mint on Metadata"),
        (16, "EditionsMustHaveExactlyOneToken", "Editions must have exactly one token"),
    ]
)


def _gpa_resolver(metaplex: Metaplex) -> TokenMetadataGpaBuilder:
    from metaplex_sdk.plugins.nft_module.gpa import TokenMetadataGpaBuilder

    return TokenMetadataGpaBuilder(metaplex, TOKEN_METADATA_PROGRAM_ID)


TokenMetadataProgram = Program(
    name=TOKEN_METADATA_PROGRAM_NAME,
    address=TOKEN_METADATA_PROGRAM_ID,
    error_resolver=make_error_resolver(TOKEN_METADATA_PROGRAM_NAME, TOKEN_METADATA_ERRORS),
    gpa_resolver=_gpa_resolver,
)

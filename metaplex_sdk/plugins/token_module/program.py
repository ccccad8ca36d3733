"""SPL Token program registration: address, custom error codes, account search."""

from __future__ import annotations

from typing import TYPE_CHECKING

from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from metaplex_sdk.core.program import Program, custom_error_table, make_error_resolver

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex
    from metaplex_sdk.plugins.token_module.gpa import TokenGpaBuilder

TOKEN_PROGRAM_NAME = "TokenProgram"
ASSOCIATED_TOKEN_PROGRAM_NAME = "AssociatedTokenProgram"

# spl-token TokenError discriminants.
TOKEN_PROGRAM_ERRORS = custom_error_table(
    [
        (0, "NotRentExempt", "Lamport balance below rent-exempt threshold"),
        (1, "InsufficientFunds", "Insufficient funds"),
        (2, "InvalidMint", "Invalid Mint"),
        (3, "MintMismatch", "Account not associated with this Mint"),
        (4, "OwnerMismatch", "Owner does not match"),
        (5, "FixedSupply", "Fixed supply"),
        (6, "AlreadyInUse", "Already in use"),
        (7, "InvalidNumberOfProvidedSigners", "Invalid number of provided signers"),
        (8, "InvalidNumberOfRequiredSigners", "Invalid number of required signers"),
        (9, "UninitializedState", "State is uninitialized"),
        (10, "NativeNotSupported", "Instruction does not support native tokens"),
        (11, "NonNativeHasBalance", "Non-native account can only be closed if its balance is zero"),
        (12, "InvalidInstruction", "Invalid instruction"),
        (13, "InvalidState", "State is invalid for requested operation"),
        (14, "Overflow", "Operation overflowed"),
        (15, "AuthorityTypeNotSupported", "Account does not support specified authority type"),
        (16, "MintCannotFreeze", "This token mint cannot freeze accounts"),
        (17, "AccountFrozen", "Account is frozen"),
        (18, "MintDecimalsMismatch", "The provided decimals value different from the Mint decimals"),
        (19, "NonNativeNotSupported", "Instruction does not support non-native tokens"),
    ]
)


def _gpa_resolver(metaplex: Metaplex) -> TokenGpaBuilder:
    from metaplex_sdk.plugins.token_module.gpa import TokenGpaBuilder

    return TokenGpaBuilder(metaplex, TOKEN_PROGRAM_ID)


TokenProgram = Program(
    name=TOKEN_PROGRAM_NAME,
    address=TOKEN_PROGRAM_ID,
    error_resolver=make_error_resolver(TOKEN_PROGRAM_NAME, TOKEN_PROGRAM_ERRORS),
    gpa_resolver=_gpa_resolver,
)

AssociatedTokenProgram = Program(
    name=ASSOCIATED_TOKEN_PROGRAM_NAME,
    address=ASSOCIATED_TOKEN_PROGRAM_ID,
)

"""Token program PDAs."""

from __future__ import annotations

from solders.pubkey import Pubkey
from spl.token.constants import ASSOCIATED_TOKEN_PROGRAM_ID, TOKEN_PROGRAM_ID

from metaplex_sdk.core.pda import Pda, find_pda


def find_associated_token_account_pda(
    mint: Pubkey,
    owner: Pubkey,
    token_program: Pubkey = TOKEN_PROGRAM_ID,
    associated_token_program: Pubkey = ASSOCIATED_TOKEN_PROGRAM_ID,
) -> Pda:
    """Seeds: [owner, token program, mint] under the associated token program."""
    return find_pda([bytes(owner), bytes(token_program), bytes(mint)], associated_token_program)

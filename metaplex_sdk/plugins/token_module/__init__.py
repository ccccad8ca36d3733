"""SPL Token support: mints, token accounts and transfers."""

from metaplex_sdk.plugins.token_module.client import TokenClient
from metaplex_sdk.plugins.token_module.models import Mint, Token, to_mint, to_token
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda
from metaplex_sdk.plugins.token_module.plugin import TokenModule, token_module
from metaplex_sdk.plugins.token_module.program import TokenProgram
from metaplex_sdk.plugins.token_module.send_tokens import (
    SendTokensInput,
    SendTokensOutput,
    send_tokens_builder,
    send_tokens_operation,
)

__all__ = [
    "Mint",
    "SendTokensInput",
    "SendTokensOutput",
    "Token",
    "TokenClient",
    "TokenModule",
    "TokenProgram",
    "find_associated_token_account_pda",
    "send_tokens_builder",
    "send_tokens_operation",
    "to_mint",
    "to_token",
]

"""Token module plugin: registers the token programs, operations and mx.tokens()."""

from __future__ import annotations

from typing import TYPE_CHECKING

from metaplex_sdk.plugins.token_module.client import TokenClient
from metaplex_sdk.plugins.token_module.find_mint_by_address import (
    find_mint_by_address_handler,
    find_mint_by_address_operation,
)
from metaplex_sdk.plugins.token_module.find_token_by_address import (
    find_token_by_address_handler,
    find_token_by_address_operation,
)
from metaplex_sdk.plugins.token_module.program import AssociatedTokenProgram, TokenProgram
from metaplex_sdk.plugins.token_module.send_tokens import send_tokens_handler, send_tokens_operation

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex


class TokenModule:
    def install(self, metaplex: Metaplex) -> None:
        metaplex.programs().register(TokenProgram)
        metaplex.programs().register(AssociatedTokenProgram)

        op = metaplex.operations()
        op.register(send_tokens_operation, send_tokens_handler)
        op.register(find_mint_by_address_operation, find_mint_by_address_handler)
        op.register(find_token_by_address_operation, find_token_by_address_handler)

        metaplex.register_client("tokens", TokenClient)


def token_module() -> TokenModule:
    return TokenModule()

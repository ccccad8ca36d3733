"""TokenClient: mx.tokens() facade over the token operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from solders.pubkey import Pubkey

from metaplex_sdk.core.amount import Amount
from metaplex_sdk.core.transaction_builder import TransactionBuilder
from metaplex_sdk.plugins.token_module.find_mint_by_address import (
    FindMintByAddressInput,
    find_mint_by_address_operation,
)
from metaplex_sdk.plugins.token_module.find_token_by_address import (
    FindTokenByAddressInput,
    find_token_by_address_operation,
)
from metaplex_sdk.plugins.token_module.models import Mint, Token
from metaplex_sdk.plugins.token_module.send_tokens import (
    SendTokensBuilderParams,
    SendTokensInput,
    SendTokensOutput,
    send_tokens_builder,
    send_tokens_operation,
)

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex


class TokenBuildersClient:
    def __init__(self, metaplex: Metaplex) -> None:
        self._metaplex = metaplex

    def send(self, mint: Pubkey | Mint, amount: Amount, **kwargs: Any) -> TransactionBuilder[None]:
        return send_tokens_builder(self._metaplex, SendTokensBuilderParams(mint=mint, amount=amount, **kwargs))


class TokenClient:
    def __init__(self, metaplex: Metaplex) -> None:
        self._metaplex = metaplex

    def builders(self) -> TokenBuildersClient:
        return TokenBuildersClient(self._metaplex)

    async def send(self, mint: Pubkey | Mint, amount: Amount, **kwargs: Any) -> SendTokensOutput:
        operation = send_tokens_operation(SendTokensInput(mint=mint, amount=amount, **kwargs))
        return await self._metaplex.run(operation)

    async def find_mint_by_address(self, address: Pubkey, commitment: str | None = None) -> Mint:
        operation = find_mint_by_address_operation(FindMintByAddressInput(address, commitment))
        return await self._metaplex.run(operation)

    async def find_token_by_address(self, address: Pubkey, commitment: str | None = None) -> Token:
        operation = find_token_by_address_operation(FindTokenByAddressInput(address, commitment))
        return await self._metaplex.run(operation)

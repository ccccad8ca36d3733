"""Account search over the SPL Token program."""

from __future__ import annotations

from solders.pubkey import Pubkey
from spl.token.constants import ACCOUNT_LEN

from metaplex_sdk.core.program import GpaBuilder

# Token account byte offsets.
MINT_OFFSET = 0
OWNER_OFFSET = 32
AMOUNT_OFFSET = 64


class TokenGpaBuilder(GpaBuilder):
    def token_accounts(self) -> TokenGpaBuilder:
        if ACCOUNT_LEN in self._filters:
            return self
        return self.where_size(ACCOUNT_LEN)

    def where_mint(self, mint: Pubkey) -> TokenGpaBuilder:
        return self.token_accounts().where(MINT_OFFSET, mint)

    def where_owner(self, owner: Pubkey) -> TokenGpaBuilder:
        return self.token_accounts().where(OWNER_OFFSET, owner)

    def where_amount(self, amount: int) -> TokenGpaBuilder:
        return self.where(AMOUNT_OFFSET, amount.to_bytes(8, "little"))

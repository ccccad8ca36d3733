"""Account search over the Token Metadata program."""

from __future__ import annotations

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.program import GpaBuilder
from metaplex_sdk.plugins.nft_module.accounts import (
    FIRST_CREATOR_OFFSET,
    MAX_CREATOR_LEN,
    MAX_CREATOR_LIMIT,
    MINT_OFFSET,
    UPDATE_AUTHORITY_OFFSET,
    Key,
)


class TokenMetadataGpaBuilder(GpaBuilder):
    def where_key(self, key: Key) -> TokenMetadataGpaBuilder:
        return self.where(0, int(key))

    def metadata_v1_accounts(self) -> TokenMetadataGpaBuilder:
        return self.where_key(Key.MetadataV1)

    def where_update_authority(self, update_authority: Pubkey) -> TokenMetadataGpaBuilder:
        return self.metadata_v1_accounts().where(UPDATE_AUTHORITY_OFFSET, update_authority)

    def where_mint(self, mint: Pubkey) -> TokenMetadataGpaBuilder:
        return self.metadata_v1_accounts().where(MINT_OFFSET, mint)

    def where_creator(self, position: int, creator: Pubkey) -> TokenMetadataGpaBuilder:
        """Match creator at 1-based position. Only accounts whose creator list is that long match."""
        if not 1 <= position <= MAX_CREATOR_LIMIT:
            raise ValidationError(f"Creator position must be between 1 and {MAX_CREATOR_LIMIT}, got {position}")
        offset = FIRST_CREATOR_OFFSET + (position - 1) * MAX_CREATOR_LEN
        return self.metadata_v1_accounts().where(offset, creator)

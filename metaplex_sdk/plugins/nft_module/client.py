"""NftClient: mx.nfts() facade over the NFT operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN

from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import TransactionBuilder
from metaplex_sdk.plugins.nft_module.create_nft import (
    CreateNftBuilderContext,
    CreateNftInput,
    CreateNftOutput,
    create_nft_builder,
    create_nft_operation,
)
from metaplex_sdk.plugins.nft_module.create_sft import (
    CreateSftBuilderContext,
    CreateSftInput,
    CreateSftOutput,
    create_sft_builder,
    create_sft_operation,
)
from metaplex_sdk.plugins.nft_module.find_nft_by_metadata import (
    FindNftByMetadataInput,
    find_nft_by_metadata_operation,
)
from metaplex_sdk.plugins.nft_module.find_nft_by_mint import FindNftByMintInput, find_nft_by_mint_operation
from metaplex_sdk.plugins.nft_module.find_nft_by_token import FindNftByTokenInput, find_nft_by_token_operation
from metaplex_sdk.plugins.nft_module.find_nfts_by_creator import (
    FindNftsByCreatorInput,
    find_nfts_by_creator_operation,
)
from metaplex_sdk.plugins.nft_module.find_nfts_by_mint_list import (
    FindNftsByMintListInput,
    find_nfts_by_mint_list_operation,
)
from metaplex_sdk.plugins.nft_module.find_nfts_by_owner import FindNftsByOwnerInput, find_nfts_by_owner_operation
from metaplex_sdk.plugins.nft_module.find_nfts_by_update_authority import (
    FindNftsByUpdateAuthorityInput,
    find_nfts_by_update_authority_operation,
)
from metaplex_sdk.plugins.nft_module.load_metadata import LoadMetadataInput, load_metadata_operation
from metaplex_sdk.plugins.nft_module.models import Metadata, Nft, Sft
from metaplex_sdk.plugins.nft_module.print_new_edition import (
    PrintNewEditionBuilderContext,
    PrintNewEditionInput,
    PrintNewEditionOutput,
    find_original_edition,
    next_edition_number,
    print_new_edition_builder,
    print_new_edition_operation,
)
from metaplex_sdk.plugins.nft_module.update_nft import (
    UpdateNftInput,
    UpdateNftOutput,
    update_nft_builder,
    update_nft_operation,
)
from metaplex_sdk.plugins.nft_module.use_nft import UseNftInput, UseNftOutput, use_nft_builder, use_nft_operation

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex


class NftBuildersClient:
    """
    Builders without sending, for callers that compose their own transactions.

    create(), create_sft() and print_new_edition() look up what they need from
    the chain (mint rent, next edition number) unless it is given, so they are
    coroutines; the returned builders are not yet sent.
    """

    def __init__(self, metaplex: Metaplex) -> None:
        self._metaplex = metaplex

    async def _mint_rent(self, mint_rent: int | None, use_existing_mint: Any) -> int | None:
        if mint_rent is not None or use_existing_mint is not None:
            return mint_rent
        return await self._metaplex.rpc().get_rent(MINT_LEN)

    async def create(
        self, params: CreateNftInput, mint_rent: int | None = None
    ) -> TransactionBuilder[CreateNftBuilderContext]:
        rent = await self._mint_rent(mint_rent, params.use_existing_mint)
        return create_nft_builder(self._metaplex, params, mint_rent=rent)

    async def create_sft(
        self, params: CreateSftInput, mint_rent: int | None = None
    ) -> TransactionBuilder[CreateSftBuilderContext]:
        rent = await self._mint_rent(mint_rent, params.use_existing_mint)
        return create_sft_builder(self._metaplex, params, mint_rent=rent)

    def update(self, nft: Metadata | Sft, **kwargs: Any) -> TransactionBuilder[None]:
        return update_nft_builder(self._metaplex, UpdateNftInput(nft=nft, **kwargs))

    async def print_new_edition(
        self,
        params: PrintNewEditionInput,
        *,
        edition_number: int | None = None,
        mint_rent: int | None = None,
    ) -> TransactionBuilder[PrintNewEditionBuilderContext]:
        """Reads the master edition for the next number unless edition_number is given."""
        if edition_number is None:
            edition = await find_original_edition(self._metaplex, params.original_mint, params.commitment)
            edition_number = next_edition_number(edition)
        if mint_rent is None:
            mint_rent = await self._metaplex.rpc().get_rent(MINT_LEN)
        return print_new_edition_builder(self._metaplex, params, edition_number=edition_number, mint_rent=mint_rent)

    def use(self, nft: Metadata | Sft, **kwargs: Any) -> TransactionBuilder[None]:
        return use_nft_builder(self._metaplex, UseNftInput(nft=nft, **kwargs))


class NftClient:
    def __init__(self, metaplex: Metaplex) -> None:
        self._metaplex = metaplex

    def builders(self) -> NftBuildersClient:
        return NftBuildersClient(self._metaplex)

    async def create(
        self, name: str, uri: str, seller_fee_basis_points: int, scope: CancellationScope | None = None, **kwargs: Any
    ) -> CreateNftOutput:
        params = CreateNftInput(name=name, uri=uri, seller_fee_basis_points=seller_fee_basis_points, **kwargs)
        return await self._metaplex.run(create_nft_operation(params), scope)

    async def create_sft(
        self, name: str, uri: str, seller_fee_basis_points: int, scope: CancellationScope | None = None, **kwargs: Any
    ) -> CreateSftOutput:
        params = CreateSftInput(name=name, uri=uri, seller_fee_basis_points=seller_fee_basis_points, **kwargs)
        return await self._metaplex.run(create_sft_operation(params), scope)

    async def find_by_mint(
        self, mint_address: Pubkey, scope: CancellationScope | None = None, **kwargs: Any
    ) -> Nft | Sft:
        params = FindNftByMintInput(mint_address=mint_address, **kwargs)
        return await self._metaplex.run(find_nft_by_mint_operation(params), scope)

    async def find_by_metadata(
        self, metadata_address: Pubkey, scope: CancellationScope | None = None, **kwargs: Any
    ) -> Nft | Sft:
        params = FindNftByMetadataInput(metadata_address=metadata_address, **kwargs)
        return await self._metaplex.run(find_nft_by_metadata_operation(params), scope)

    async def find_by_token(
        self, token_address: Pubkey, scope: CancellationScope | None = None, **kwargs: Any
    ) -> Nft | Sft:
        params = FindNftByTokenInput(token_address=token_address, **kwargs)
        return await self._metaplex.run(find_nft_by_token_operation(params), scope)

    async def find_all_by_mint_list(
        self, mints: list[Pubkey], commitment: str | None = None
    ) -> list[Metadata | None]:
        params = FindNftsByMintListInput(mints=list(mints), commitment=commitment)
        return await self._metaplex.run(find_nfts_by_mint_list_operation(params))

    async def find_all_by_owner(self, owner: Pubkey, commitment: str | None = None) -> list[Metadata]:
        params = FindNftsByOwnerInput(owner=owner, commitment=commitment)
        return await self._metaplex.run(find_nfts_by_owner_operation(params))

    async def find_all_by_creator(self, creator: Pubkey, position: int = 1) -> list[Metadata]:
        params = FindNftsByCreatorInput(creator=creator, position=position)
        return await self._metaplex.run(find_nfts_by_creator_operation(params))

    async def find_all_by_update_authority(self, update_authority: Pubkey) -> list[Metadata]:
        params = FindNftsByUpdateAuthorityInput(update_authority=update_authority)
        return await self._metaplex.run(find_nfts_by_update_authority_operation(params))

    async def load_metadata(self, metadata: Metadata) -> Metadata:
        return await self._metaplex.run(load_metadata_operation(LoadMetadataInput(metadata)))

    async def update(self, nft: Metadata | Sft, **kwargs: Any) -> UpdateNftOutput:
        return await self._metaplex.run(update_nft_operation(UpdateNftInput(nft=nft, **kwargs)))

    async def print_new_edition(
        self, original_mint: Pubkey, scope: CancellationScope | None = None, **kwargs: Any
    ) -> PrintNewEditionOutput:
        params = PrintNewEditionInput(original_mint=original_mint, **kwargs)
        return await self._metaplex.run(print_new_edition_operation(params), scope)

    async def use(self, nft: Metadata | Sft, number_of_uses: int = 1, **kwargs: Any) -> UseNftOutput:
        params = UseNftInput(nft=nft, number_of_uses=number_of_uses, **kwargs)
        return await self._metaplex.run(use_nft_operation(params))

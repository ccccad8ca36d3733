"""
UpdateNftOperation: change the on-chain metadata of an existing asset.

Only fields given a value are changed. Data fields (name, symbol, uri, seller
fee, creators, collection, uses) are written together as one DataV2, merged
with the asset's current values; the authority, primary-sale and mutability
flags are independent optional arguments of the same instruction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.plugins.nft_module.create_sft import validate_metadata_fields
from metaplex_sdk.plugins.nft_module.instructions import update_metadata_account_v2_instruction
from metaplex_sdk.plugins.nft_module.models import Collection, Creator, Metadata, Sft, Uses, to_data_v2
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

UPDATE_NFT_KEY = "UpdateNftOperation"
update_nft_operation = use_operation(UPDATE_NFT_KEY)

_DATA_FIELDS = ("name", "symbol", "uri", "seller_fee_basis_points", "creators", "collection", "uses")


@dataclass
class UpdateNftInput:
    nft: Metadata | Sft
    name: str | None = None
    symbol: str | None = None
    uri: str | None = None
    seller_fee_basis_points: int | None = None
    creators: list[Creator] | None = None
    collection: Collection | None = None
    uses: Uses | None = None
    new_update_authority: Pubkey | None = None
    primary_sale_happened: bool | None = None
    is_mutable: bool | None = None
    update_authority: Keypair | None = None
    payer: Keypair | None = None
    confirm_options: ConfirmOptions | None = None
    instruction_key: str | None = None


@dataclass(frozen=True)
class UpdateNftOutput:
    response: SendAndConfirmTransactionResponse


def _metadata_of(nft: Metadata | Sft) -> Metadata:
    return nft.metadata if isinstance(nft, Sft) else nft


async def update_nft_handler(
    operation: Operation[UpdateNftInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> UpdateNftOutput:
    builder = update_nft_builder(metaplex, operation.input)
    scope.throw_if_canceled()
    response = await builder.send_and_confirm(metaplex, operation.input.confirm_options)
    return UpdateNftOutput(response=response)


def update_nft_builder(metaplex: Metaplex, params: UpdateNftInput) -> TransactionBuilder[None]:
    current = _metadata_of(params.nft)
    if not current.is_mutable:
        raise ValidationError(f"Metadata {current.address} is immutable")

    data = None
    if any(getattr(params, name) is not None for name in _DATA_FIELDS):
        name = current.name if params.name is None else params.name
        symbol = current.symbol if params.symbol is None else params.symbol
        uri = current.uri if params.uri is None else params.uri
        fee = current.seller_fee_basis_points if params.seller_fee_basis_points is None else params.seller_fee_basis_points
        creators = current.creators if params.creators is None else tuple(params.creators)
        validate_metadata_fields(name, symbol, uri, fee, creators)
        data = to_data_v2(
            name=name,
            symbol=symbol,
            uri=uri,
            seller_fee_basis_points=fee,
            creators=creators,
            collection=current.collection if params.collection is None else params.collection,
            uses=current.uses if params.uses is None else params.uses,
        )

    if (
        data is None
        and params.new_update_authority is None
        and params.primary_sale_happened is None
        and params.is_mutable is None
    ):
        raise ValidationError("Nothing to update; pass at least one field to change")

    update_authority = params.update_authority or metaplex.identity()
    payer = params.payer or metaplex.identity()
    instruction = update_metadata_account_v2_instruction(
        metadata=current.address,
        update_authority=update_authority.pubkey(),
        data=data,
        new_update_authority=params.new_update_authority,
        primary_sale_happened=params.primary_sale_happened,
        is_mutable=params.is_mutable,
    )
    return (
        TransactionBuilder.make()
        .set_fee_payer(payer)
        .add(InstructionWithSigners(instruction, [update_authority], params.instruction_key or "update_metadata"))
    )

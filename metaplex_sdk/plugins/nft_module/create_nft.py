"""
CreateNftOperation: an SFT with zero decimals, one token minted to the owner,
and a master edition that takes over the mint and freeze authorities.

The transaction is the create_sft builder spliced in, followed by the
create_master_edition instruction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID

from metaplex_sdk.core.amount import token
from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.mx_logging import get_logger
from metaplex_sdk.plugins.nft_module.create_sft import CreateSftInput, create_sft_builder, validate_create_sft_input
from metaplex_sdk.plugins.nft_module.instructions import create_master_edition_v3_instruction
from metaplex_sdk.plugins.nft_module.models import Collection, Creator, Uses
from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

CREATE_NFT_KEY = "CreateNftOperation"
create_nft_operation = use_operation(CREATE_NFT_KEY)


@dataclass
class CreateNftInput:
    """
    max_supply: 0 (default) makes a one-of-one; None allows unlimited prints.
    """

    name: str
    uri: str
    seller_fee_basis_points: int
    symbol: str = ""
    creators: list[Creator] | None = None
    is_mutable: bool = True
    max_supply: int | None = 0
    collection: Collection | None = None
    uses: Uses | None = None
    collection_size: int | None = None
    token_owner: Pubkey | None = None
    token_exists: bool = False
    use_new_mint: Keypair | None = None
    use_existing_mint: Pubkey | None = None
    payer: Keypair | None = None
    update_authority: Keypair | None = None
    mint_authority: Keypair | None = None
    token_program: Pubkey = TOKEN_PROGRAM_ID
    confirm_options: ConfirmOptions | None = None
    instruction_keys: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateNftBuilderContext:
    mint_address: Pubkey
    metadata_address: Pubkey
    master_edition_address: Pubkey
    token_address: Pubkey | None


@dataclass(frozen=True)
class CreateNftOutput:
    response: SendAndConfirmTransactionResponse
    mint_address: Pubkey
    metadata_address: Pubkey
    master_edition_address: Pubkey
    token_address: Pubkey | None


def _to_sft_input(metaplex: Metaplex, params: CreateNftInput) -> CreateSftInput:
    mint_authority = params.mint_authority or metaplex.identity()
    return CreateSftInput(
        name=params.name,
        uri=params.uri,
        seller_fee_basis_points=params.seller_fee_basis_points,
        symbol=params.symbol,
        creators=params.creators,
        is_mutable=params.is_mutable,
        collection=params.collection,
        uses=params.uses,
        collection_size=params.collection_size,
        decimals=0,
        token_amount=token(1),
        token_owner=params.token_owner,
        token_exists=params.token_exists,
        use_new_mint=params.use_new_mint,
        use_existing_mint=params.use_existing_mint,
        payer=params.payer,
        update_authority=params.update_authority,
        mint_authority=mint_authority,
        freeze_authority=mint_authority.pubkey(),
        token_program=params.token_program,
        instruction_keys=params.instruction_keys,
    )


async def create_nft_handler(
    operation: Operation[CreateNftInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> CreateNftOutput:
    """
    One transaction, so a failure never leaves a bare mint. On
    ConfirmationTimeoutError it may still land: look the mint up before
    retrying with a fresh one.
    """
    params = operation.input
    if params.max_supply is not None and params.max_supply < 0:
        raise ValidationError(f"max_supply cannot be negative: {params.max_supply}")
    validate_create_sft_input(_to_sft_input(metaplex, params))
    mint_rent = None
    if params.use_existing_mint is None:
        mint_rent = await metaplex.rpc().get_rent(MINT_LEN)
    scope.throw_if_canceled()

    builder = create_nft_builder(metaplex, params, mint_rent=mint_rent)
    response = await builder.send_and_confirm(metaplex, params.confirm_options)
    context = builder.get_context()
    logger.info(
        "nft_created",
        mint=context.mint_address,
        master_edition=context.master_edition_address,
        signature=str(response.signature),
    )
    return CreateNftOutput(
        response=response,
        mint_address=context.mint_address,
        metadata_address=context.metadata_address,
        master_edition_address=context.master_edition_address,
        token_address=context.token_address,
    )


def create_nft_builder(
    metaplex: Metaplex,
    params: CreateNftInput,
    *,
    mint_rent: int | None = None,
) -> TransactionBuilder[CreateNftBuilderContext]:
    if params.max_supply is not None and params.max_supply < 0:
        raise ValidationError(f"max_supply cannot be negative: {params.max_supply}")
    sft_builder = create_sft_builder(metaplex, _to_sft_input(metaplex, params), mint_rent=mint_rent)
    sft_context = sft_builder.get_context()

    payer = params.payer or metaplex.identity()
    update_authority = params.update_authority or metaplex.identity()
    mint_authority = params.mint_authority or metaplex.identity()
    master_edition_address = find_master_edition_pda(sft_context.mint_address).address
    key = params.instruction_keys.get("create_master_edition", "create_master_edition")

    builder: TransactionBuilder[CreateNftBuilderContext] = TransactionBuilder()
    builder.set_fee_payer(payer)
    builder.add(
        sft_builder,
        InstructionWithSigners(
            create_master_edition_v3_instruction(
                edition=master_edition_address,
                mint=sft_context.mint_address,
                update_authority=update_authority.pubkey(),
                mint_authority=mint_authority.pubkey(),
                payer=payer.pubkey(),
                metadata=sft_context.metadata_address,
                max_supply=params.max_supply,
                token_program=params.token_program,
            ),
            [payer, mint_authority, update_authority],
            key,
        ),
    )
    return builder.set_context(
        CreateNftBuilderContext(
            mint_address=sft_context.mint_address,
            metadata_address=sft_context.metadata_address,
            master_edition_address=master_edition_address,
            token_address=sft_context.token_address,
        )
    )

"""UseNftOperation: consume uses of an asset that carries a Uses record."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID

from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.plugins.nft_module.instructions import utilize_instruction
from metaplex_sdk.plugins.nft_module.models import Metadata, Sft
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

USE_NFT_KEY = "UseNftOperation"
use_nft_operation = use_operation(USE_NFT_KEY)


@dataclass
class UseNftInput:
    """The owner signs as use authority; delegated use authorities are not supported."""

    nft: Metadata | Sft
    number_of_uses: int = 1
    owner: Keypair | None = None
    token_account: Pubkey | None = None
    payer: Keypair | None = None
    token_program: Pubkey = TOKEN_PROGRAM_ID
    confirm_options: ConfirmOptions | None = None
    instruction_key: str | None = None


@dataclass(frozen=True)
class UseNftOutput:
    response: SendAndConfirmTransactionResponse


async def use_nft_handler(
    operation: Operation[UseNftInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> UseNftOutput:
    builder = use_nft_builder(metaplex, operation.input)
    scope.throw_if_canceled()
    response = await builder.send_and_confirm(metaplex, operation.input.confirm_options)
    return UseNftOutput(response=response)


def use_nft_builder(metaplex: Metaplex, params: UseNftInput) -> TransactionBuilder[None]:
    metadata = params.nft.metadata if isinstance(params.nft, Sft) else params.nft
    if metadata.uses is None:
        raise ValidationError(f"Metadata {metadata.address} has no uses to consume")
    if params.number_of_uses < 1:
        raise ValidationError(f"number_of_uses must be at least 1, got {params.number_of_uses}")
    if params.number_of_uses > metadata.uses.remaining:
        raise ValidationError(
            f"Cannot use {params.number_of_uses} times; {metadata.uses.remaining} uses remain"
        )

    owner = params.owner or metaplex.identity()
    payer = params.payer or metaplex.identity()
    token_account = (
        params.token_account
        or find_associated_token_account_pda(metadata.mint_address, owner.pubkey(), params.token_program).address
    )
    instruction = utilize_instruction(
        metadata=metadata.address,
        token_account=token_account,
        mint=metadata.mint_address,
        use_authority=owner.pubkey(),
        owner=owner.pubkey(),
        number_of_uses=params.number_of_uses,
        token_program=params.token_program,
    )
    return (
        TransactionBuilder.make()
        .set_fee_payer(payer)
        .add(InstructionWithSigners(instruction, [owner], params.instruction_key or "use_nft"))
    )

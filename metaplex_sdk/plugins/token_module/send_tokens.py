"""
SendTokensOperation: transfer SPL tokens between two token accounts.

Source and destination default to the associated token accounts of the
owners; the owner defaults to the identity. A multisig owner is expressed as
a public key plus from_multi_signers. One transaction, one instruction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import TOKEN_PROGRAM_ID
from spl.token.instructions import TransferCheckedParams, transfer_checked

from metaplex_sdk.core.amount import Amount
from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.signer import is_signer
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.plugins.token_module.models import Mint
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

SEND_TOKENS_KEY = "SendTokensOperation"
send_tokens_operation = use_operation(SEND_TOKENS_KEY)


@dataclass
class SendTokensInput:
    mint: Pubkey | Mint
    amount: Amount
    to_owner: Pubkey | None = None
    to_token: Pubkey | None = None
    from_owner: Pubkey | Keypair | None = None
    from_token: Pubkey | None = None
    from_multi_signers: list[Keypair] = field(default_factory=list)
    payer: Keypair | None = None
    token_program: Pubkey = TOKEN_PROGRAM_ID
    confirm_options: ConfirmOptions | None = None


@dataclass
class SendTokensBuilderParams(SendTokensInput):
    instruction_key: str | None = None


@dataclass(frozen=True)
class SendTokensOutput:
    response: SendAndConfirmTransactionResponse


async def send_tokens_handler(
    operation: Operation[SendTokensInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> SendTokensOutput:
    builder = send_tokens_builder(metaplex, operation.input)
    scope.throw_if_canceled()
    response = await builder.send_and_confirm(metaplex, operation.input.confirm_options)
    return SendTokensOutput(response=response)


def send_tokens_builder(metaplex: Metaplex, params: SendTokensInput) -> TransactionBuilder[None]:
    payer = params.payer or metaplex.identity()
    to_owner = params.to_owner or metaplex.identity().pubkey()
    from_owner = params.from_owner if params.from_owner is not None else metaplex.identity()

    if is_signer(from_owner):
        from_owner_address = from_owner.pubkey()
        signers: list[Any] = [from_owner]
    else:
        if not params.from_multi_signers:
            raise ValidationError("from_owner is not a signer; provide from_multi_signers for a multisig owner")
        from_owner_address = from_owner
        signers = list(params.from_multi_signers)

    mint_address = params.mint.address if isinstance(params.mint, Mint) else params.mint
    decimals = params.mint.decimals if isinstance(params.mint, Mint) else params.amount.currency.decimals
    source = params.from_token or find_associated_token_account_pda(
        mint_address, from_owner_address, params.token_program
    ).address
    destination = params.to_token or find_associated_token_account_pda(
        mint_address, to_owner, params.token_program
    ).address

    instruction = transfer_checked(
        TransferCheckedParams(
            program_id=params.token_program,
            source=source,
            mint=mint_address,
            dest=destination,
            owner=from_owner_address,
            amount=params.amount.basis_points,
            decimals=decimals,
            signers=[signer.pubkey() for signer in params.from_multi_signers],
        )
    )
    instruction_key = getattr(params, "instruction_key", None) or "transfer_tokens"
    return (
        TransactionBuilder.make()
        .set_fee_payer(payer)
        .add(InstructionWithSigners(instruction, signers, instruction_key))
    )

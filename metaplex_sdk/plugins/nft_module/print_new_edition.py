"""
PrintNewEditionOperation: mint a numbered print of an original NFT.

Instructions, in order (keys overridable through instruction_keys):
  create_account, initialize_mint      new mint, zero decimals
  create_associated_token_account      for the new owner
  mint_tokens                          one token
  print_new_edition                    MintNewEditionFromMasterEditionViaToken

The edition number is the master edition's supply + 1, read just before the
transaction is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import MintToParams, create_associated_token_account, mint_to

from metaplex_sdk.core.exceptions import AccountNotFoundError, ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.mx_logging import get_logger
from metaplex_sdk.plugins.nft_module.accounts import parse_edition_account
from metaplex_sdk.plugins.nft_module.create_sft import create_mint_instructions
from metaplex_sdk.plugins.nft_module.instructions import mint_new_edition_from_master_edition_via_token_instruction
from metaplex_sdk.plugins.nft_module.models import NftEdition, to_nft_edition
from metaplex_sdk.plugins.nft_module.pdas import find_edition_marker_pda, find_master_edition_pda, find_metadata_pda
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

PRINT_NEW_EDITION_KEY = "PrintNewEditionOperation"
print_new_edition_operation = use_operation(PRINT_NEW_EDITION_KEY)

PRINT_INSTRUCTION_KEYS = {
    "create_account": "create_account",
    "initialize_mint": "initialize_mint",
    "create_associated_token_account": "create_associated_token_account",
    "mint_tokens": "mint_tokens",
    "print_new_edition": "print_new_edition",
}


@dataclass
class PrintNewEditionInput:
    """
    original_token_account defaults to the associated token account of
    original_token_account_owner (the identity) for original_mint.
    """

    original_mint: Pubkey
    new_mint: Keypair | None = None
    new_mint_authority: Keypair | None = None
    new_update_authority: Pubkey | None = None
    new_owner: Pubkey | None = None
    new_freeze_authority: Pubkey | None = None
    payer: Keypair | None = None
    original_token_account_owner: Keypair | None = None
    original_token_account: Pubkey | None = None
    token_program: Pubkey = TOKEN_PROGRAM_ID
    commitment: str | None = None
    confirm_options: ConfirmOptions | None = None
    instruction_keys: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class PrintNewEditionBuilderContext:
    mint_address: Pubkey
    metadata_address: Pubkey
    edition_address: Pubkey
    token_address: Pubkey
    edition_number: int


@dataclass(frozen=True)
class PrintNewEditionOutput:
    response: SendAndConfirmTransactionResponse
    mint_address: Pubkey
    metadata_address: Pubkey
    edition_address: Pubkey
    token_address: Pubkey
    edition_number: int


async def find_original_edition(metaplex: Metaplex, original_mint: Pubkey, commitment: str | None = None) -> NftEdition:
    address = find_master_edition_pda(original_mint).address
    account = await metaplex.rpc().get_account(address, commitment)
    if account is None:
        raise AccountNotFoundError(address, "MasterEdition")
    edition = to_nft_edition(address, parse_edition_account(account))
    if not edition.is_original:
        raise ValidationError(f"Mint {original_mint} is a print edition; only originals can be printed")
    return edition


def next_edition_number(edition: NftEdition) -> int:
    if edition.max_supply is not None and edition.supply >= edition.max_supply:
        raise ValidationError(
            f"Master edition {edition.address} has printed all {edition.max_supply} of its editions"
        )
    return edition.supply + 1


async def print_new_edition_handler(
    operation: Operation[PrintNewEditionInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> PrintNewEditionOutput:
    """
    Everything happens in one transaction, so a failure never leaves a bare
    mint behind. Partial completion is still possible across calls:

    - The edition number is read before sending. A concurrent print that lands
      first claims it and this transaction is rejected; nothing is created and
      the call can simply be repeated.
    - On ConfirmationTimeoutError the print may still land. Check the new mint
      before retrying, or a second edition will be printed.
    - An NFT created with CreateNftOperation and printed afterwards is two
      transactions; a failed print leaves the original intact and printable.
    """
    params = operation.input
    edition = await find_original_edition(metaplex, params.original_mint, params.commitment)
    edition_number = next_edition_number(edition)
    mint_rent = await metaplex.rpc().get_rent(MINT_LEN)
    scope.throw_if_canceled()

    builder = print_new_edition_builder(metaplex, params, edition_number=edition_number, mint_rent=mint_rent)
    response = await builder.send_and_confirm(metaplex, params.confirm_options)
    context = builder.get_context()
    logger.info(
        "edition_printed",
        original_mint=params.original_mint,
        mint=context.mint_address,
        edition_number=edition_number,
        signature=str(response.signature),
    )
    return PrintNewEditionOutput(
        response=response,
        mint_address=context.mint_address,
        metadata_address=context.metadata_address,
        edition_address=context.edition_address,
        token_address=context.token_address,
        edition_number=edition_number,
    )


def print_new_edition_builder(
    metaplex: Metaplex,
    params: PrintNewEditionInput,
    *,
    edition_number: int,
    mint_rent: int,
) -> TransactionBuilder[PrintNewEditionBuilderContext]:
    """Pure: edition_number and mint_rent come from the caller."""
    if edition_number < 1:
        raise ValidationError(f"Edition numbers start at 1, got {edition_number}")
    payer = params.payer or metaplex.identity()
    new_mint = params.new_mint or Keypair()
    new_mint_authority = params.new_mint_authority or metaplex.identity()
    original_owner = params.original_token_account_owner or metaplex.identity()
    new_owner = params.new_owner or metaplex.identity().pubkey()
    new_update_authority = params.new_update_authority or new_mint_authority.pubkey()
    keys = {**PRINT_INSTRUCTION_KEYS, **params.instruction_keys}

    mint_address = new_mint.pubkey()
    metadata_address = find_metadata_pda(mint_address).address
    edition_address = find_master_edition_pda(mint_address).address
    token_address = find_associated_token_account_pda(mint_address, new_owner, params.token_program).address
    original_token_account = (
        params.original_token_account
        or find_associated_token_account_pda(params.original_mint, original_owner.pubkey(), params.token_program).address
    )

    ata_kwargs: dict[str, Any] = {}
    if params.token_program != TOKEN_PROGRAM_ID:
        ata_kwargs["token_program_id"] = params.token_program

    builder: TransactionBuilder[PrintNewEditionBuilderContext] = TransactionBuilder()
    builder.set_fee_payer(payer)
    builder.add(
        *create_mint_instructions(
            payer=payer,
            new_mint=new_mint,
            mint_rent=mint_rent,
            decimals=0,
            mint_authority=new_mint_authority.pubkey(),
            freeze_authority=params.new_freeze_authority or new_mint_authority.pubkey(),
            token_program=params.token_program,
            keys=keys,
        ),
        InstructionWithSigners(
            create_associated_token_account(payer=payer.pubkey(), owner=new_owner, mint=mint_address, **ata_kwargs),
            [payer],
            keys["create_associated_token_account"],
        ),
        InstructionWithSigners(
            mint_to(
                MintToParams(
                    program_id=params.token_program,
                    mint=mint_address,
                    dest=token_address,
                    mint_authority=new_mint_authority.pubkey(),
                    amount=1,
                    signers=[],
                )
            ),
            [new_mint_authority],
            keys["mint_tokens"],
        ),
        InstructionWithSigners(
            mint_new_edition_from_master_edition_via_token_instruction(
                new_metadata=metadata_address,
                new_edition=edition_address,
                master_edition=find_master_edition_pda(params.original_mint).address,
                new_mint=mint_address,
                edition_marker=find_edition_marker_pda(params.original_mint, edition_number).address,
                new_mint_authority=new_mint_authority.pubkey(),
                payer=payer.pubkey(),
                token_account_owner=original_owner.pubkey(),
                token_account=original_token_account,
                new_metadata_update_authority=new_update_authority,
                metadata=find_metadata_pda(params.original_mint).address,
                edition=edition_number,
                token_program=params.token_program,
            ),
            [new_mint_authority, payer, original_owner],
            keys["print_new_edition"],
        ),
    )
    return builder.set_context(
        PrintNewEditionBuilderContext(
            mint_address=mint_address,
            metadata_address=metadata_address,
            edition_address=edition_address,
            token_address=token_address,
            edition_number=edition_number,
        )
    )

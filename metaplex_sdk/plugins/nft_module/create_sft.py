"""
CreateSftOperation: mint a new asset with Token Metadata in one transaction.

Instructions, in order (keys overridable through instruction_keys):
  create_account, initialize_mint            new mint only
  create_associated_token_account, mint_tokens   when token_amount is given
  create_metadata
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.constants import MINT_LEN, TOKEN_PROGRAM_ID
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    initialize_mint,
    mint_to,
)

from metaplex_sdk.core.amount import Amount
from metaplex_sdk.core.exceptions import ValidationError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder
from metaplex_sdk.mx_logging import get_logger
from metaplex_sdk.plugins.nft_module.accounts import (
    MAX_CREATOR_LIMIT,
    MAX_NAME_LENGTH,
    MAX_SYMBOL_LENGTH,
    MAX_URI_LENGTH,
)
from metaplex_sdk.plugins.nft_module.instructions import create_metadata_account_v3_instruction
from metaplex_sdk.plugins.nft_module.models import Collection, Creator, Uses, to_data_v2
from metaplex_sdk.plugins.nft_module.pdas import find_metadata_pda
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda
from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

CREATE_SFT_KEY = "CreateSftOperation"
create_sft_operation = use_operation(CREATE_SFT_KEY)

MAX_SELLER_FEE_BASIS_POINTS = 10_000

SFT_INSTRUCTION_KEYS = {
    "create_account": "create_account",
    "initialize_mint": "initialize_mint",
    "create_associated_token_account": "create_associated_token_account",
    "mint_tokens": "mint_tokens",
    "create_metadata": "create_metadata",
}


@dataclass
class CreateSftInput:
    name: str
    uri: str
    seller_fee_basis_points: int
    symbol: str = ""
    creators: list[Creator] | None = None
    is_mutable: bool = True
    collection: Collection | None = None
    uses: Uses | None = None
    collection_size: int | None = None
    decimals: int = 0
    token_amount: Amount | None = None
    token_owner: Pubkey | None = None
    token_exists: bool = False
    use_new_mint: Keypair | None = None
    use_existing_mint: Pubkey | None = None
    payer: Keypair | None = None
    update_authority: Keypair | None = None
    mint_authority: Keypair | None = None
    freeze_authority: Pubkey | None = None
    token_program: Pubkey = TOKEN_PROGRAM_ID
    confirm_options: ConfirmOptions | None = None
    instruction_keys: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CreateSftBuilderContext:
    mint_address: Pubkey
    metadata_address: Pubkey
    token_address: Pubkey | None


@dataclass(frozen=True)
class CreateSftOutput:
    response: SendAndConfirmTransactionResponse
    mint_address: Pubkey
    metadata_address: Pubkey
    token_address: Pubkey | None


def validate_metadata_fields(
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int,
    creators: list[Creator] | tuple[Creator, ...] | None,
) -> None:
    """Reject values the Token Metadata program would refuse, before anything is sent."""
    if len(name.encode("utf-8")) > MAX_NAME_LENGTH:
        raise ValidationError(f"name is longer than {MAX_NAME_LENGTH} bytes: {name!r}")
    if len(symbol.encode("utf-8")) > MAX_SYMBOL_LENGTH:
        raise ValidationError(f"symbol is longer than {MAX_SYMBOL_LENGTH} bytes: {symbol!r}")
    if len(uri.encode("utf-8")) > MAX_URI_LENGTH:
        raise ValidationError(f"uri is longer than {MAX_URI_LENGTH} bytes")
    if not 0 <= seller_fee_basis_points <= MAX_SELLER_FEE_BASIS_POINTS:
        raise ValidationError(
            f"seller_fee_basis_points must be between 0 and {MAX_SELLER_FEE_BASIS_POINTS}, got {seller_fee_basis_points}"
        )
    if not creators:
        return
    if len(creators) > MAX_CREATOR_LIMIT:
        raise ValidationError(f"At most {MAX_CREATOR_LIMIT} creators are allowed, got {len(creators)}")
    if len({c.address for c in creators}) != len(creators):
        raise ValidationError("Creator addresses must be unique")
    total = sum(c.share for c in creators)
    if total != 100:
        raise ValidationError(f"Creator shares must add up to 100, got {total}")


def validate_create_sft_input(params: CreateSftInput) -> None:
    validate_metadata_fields(
        params.name, params.symbol, params.uri, params.seller_fee_basis_points, params.creators
    )
    if params.use_new_mint is not None and params.use_existing_mint is not None:
        raise ValidationError("use_new_mint and use_existing_mint are mutually exclusive")
    if not 0 <= params.decimals <= 255:
        raise ValidationError(f"decimals must fit in a u8, got {params.decimals}")


def resolve_creators(creators: list[Creator] | None, update_authority: Pubkey) -> list[Creator]:
    """Default to the update authority as sole creator; a creator signing as update authority is verified."""
    if creators is None:
        return [Creator(address=update_authority, share=100, verified=True)]
    return [Creator(address=c.address, share=c.share, verified=c.address == update_authority) for c in creators]


async def create_sft_handler(
    operation: Operation[CreateSftInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> CreateSftOutput:
    """One transaction; see create_nft_handler for confirmation timeouts."""
    params = operation.input
    validate_create_sft_input(params)
    mint_rent = None
    if params.use_existing_mint is None:
        mint_rent = await metaplex.rpc().get_rent(MINT_LEN)
    scope.throw_if_canceled()

    builder = create_sft_builder(metaplex, params, mint_rent=mint_rent)
    response = await builder.send_and_confirm(metaplex, params.confirm_options)
    context = builder.get_context()
    logger.info(
        "sft_created",
        mint=context.mint_address,
        metadata=context.metadata_address,
        signature=str(response.signature),
    )
    return CreateSftOutput(
        response=response,
        mint_address=context.mint_address,
        metadata_address=context.metadata_address,
        token_address=context.token_address,
    )


def create_sft_builder(
    metaplex: Metaplex,
    params: CreateSftInput,
    *,
    mint_rent: int | None = None,
) -> TransactionBuilder[CreateSftBuilderContext]:
    """
    Pure: no network access. mint_rent (lamports for a rent-exempt mint) is
    required unless use_existing_mint is set.
    """
    validate_create_sft_input(params)
    payer = params.payer or metaplex.identity()
    update_authority = params.update_authority or metaplex.identity()
    mint_authority = params.mint_authority or metaplex.identity()
    keys = {**SFT_INSTRUCTION_KEYS, **params.instruction_keys}

    builder: TransactionBuilder[CreateSftBuilderContext] = TransactionBuilder()
    builder.set_fee_payer(payer)

    if params.use_existing_mint is not None:
        mint_address = params.use_existing_mint
    else:
        if mint_rent is None:
            raise ValidationError("mint_rent is required when creating a new mint")
        new_mint = params.use_new_mint or Keypair()
        mint_address = new_mint.pubkey()
        builder.add(
            *create_mint_instructions(
                payer=payer,
                new_mint=new_mint,
                mint_rent=mint_rent,
                decimals=params.decimals,
                mint_authority=mint_authority.pubkey(),
                freeze_authority=params.freeze_authority or mint_authority.pubkey(),
                token_program=params.token_program,
                keys=keys,
            )
        )

    token_address = None
    if params.token_amount is not None:
        builder.add(*_mint_tokens_instructions(metaplex, params, mint_address, payer, mint_authority, keys))
        token_owner = params.token_owner or metaplex.identity().pubkey()
        token_address = find_associated_token_account_pda(mint_address, token_owner, params.token_program).address

    metadata_address = find_metadata_pda(mint_address).address
    data = to_data_v2(
        name=params.name,
        symbol=params.symbol,
        uri=params.uri,
        seller_fee_basis_points=params.seller_fee_basis_points,
        creators=resolve_creators(params.creators, update_authority.pubkey()),
        collection=params.collection,
        uses=params.uses,
    )
    builder.add(
        InstructionWithSigners(
            create_metadata_account_v3_instruction(
                metadata=metadata_address,
                mint=mint_address,
                mint_authority=mint_authority.pubkey(),
                payer=payer.pubkey(),
                update_authority=update_authority.pubkey(),
                data=data,
                is_mutable=params.is_mutable,
                collection_size=params.collection_size,
            ),
            [payer, mint_authority, update_authority],
            keys["create_metadata"],
        )
    )
    return builder.set_context(
        CreateSftBuilderContext(
            mint_address=mint_address,
            metadata_address=metadata_address,
            token_address=token_address,
        )
    )


def _mint_tokens_instructions(
    metaplex: Metaplex,
    params: CreateSftInput,
    mint_address: Pubkey,
    payer: Keypair,
    mint_authority: Keypair,
    keys: dict[str, str],
) -> list[InstructionWithSigners]:
    token_owner = params.token_owner or metaplex.identity().pubkey()
    token_address = find_associated_token_account_pda(mint_address, token_owner, params.token_program).address
    records = []
    if not params.token_exists:
        kwargs: dict[str, Any] = {}
        if params.token_program != TOKEN_PROGRAM_ID:
            kwargs["token_program_id"] = params.token_program
        records.append(
            InstructionWithSigners(
                create_associated_token_account(
                    payer=payer.pubkey(), owner=token_owner, mint=mint_address, **kwargs
                ),
                [payer],
                keys["create_associated_token_account"],
            )
        )
    records.append(
        InstructionWithSigners(
            mint_to(
                MintToParams(
                    program_id=params.token_program,
                    mint=mint_address,
                    dest=token_address,
                    mint_authority=mint_authority.pubkey(),
                    amount=params.token_amount.basis_points,
                    signers=[],
                )
            ),
            [mint_authority],
            keys["mint_tokens"],
        )
    )
    return records


def create_mint_instructions(
    *,
    payer: Keypair,
    new_mint: Keypair,
    mint_rent: int,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Pubkey | None,
    token_program: Pubkey,
    keys: dict[str, str],
) -> list[InstructionWithSigners]:
    """Allocate a rent-exempt mint account and initialize it."""
    return [
        InstructionWithSigners(
            create_account(
                CreateAccountParams(
                    from_pubkey=payer.pubkey(),
                    to_pubkey=new_mint.pubkey(),
                    lamports=mint_rent,
                    space=MINT_LEN,
                    owner=token_program,
                )
            ),
            [payer, new_mint],
            keys["create_account"],
        ),
        InstructionWithSigners(
            initialize_mint(
                InitializeMintParams(
                    decimals=decimals,
                    program_id=token_program,
                    mint=new_mint.pubkey(),
                    mint_authority=mint_authority,
                    freeze_authority=freeze_authority,
                )
            ),
            [],
            keys["initialize_mint"],
        ),
    ]

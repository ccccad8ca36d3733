"""FindNftsByMintListOperation: batch-load Metadata for many mints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import UnexpectedAccountError
from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.mx_logging import get_logger
from metaplex_sdk.plugins.nft_module.accounts import parse_metadata_account
from metaplex_sdk.plugins.nft_module.models import Metadata, to_metadata
from metaplex_sdk.plugins.nft_module.pdas import find_metadata_pda
from metaplex_sdk.rpc.client import UnparsedAccount

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

FIND_NFTS_BY_MINT_LIST_KEY = "FindNftsByMintListOperation"
find_nfts_by_mint_list_operation = use_operation(FIND_NFTS_BY_MINT_LIST_KEY)


@dataclass(frozen=True)
class FindNftsByMintListInput:
    mints: list[Pubkey]
    commitment: str | None = None


def metadata_or_none(account: UnparsedAccount | None) -> Metadata | None:
    if account is None:
        return None
    try:
        return to_metadata(parse_metadata_account(account))
    except UnexpectedAccountError as e:
        logger.debug("metadata_account_skipped", address=account.address, reason=e.reason)
        return None


async def find_nfts_by_mint_list_handler(
    operation: Operation[FindNftsByMintListInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> list[Metadata | None]:
    """One entry per mint, in order; None where no valid metadata exists. JSON is not loaded."""
    addresses = [find_metadata_pda(mint).address for mint in operation.input.mints]
    accounts = await metaplex.rpc().get_multiple_accounts(addresses, operation.input.commitment)
    scope.throw_if_canceled()
    return [metadata_or_none(account) for account in accounts]

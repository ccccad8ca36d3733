"""LoadMetadataOperation: attach the off-chain JSON document to a Metadata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from metaplex_sdk.core.operation import Operation, use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.plugins.nft_module.models import Metadata, with_json

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

LOAD_METADATA_KEY = "LoadMetadataOperation"
load_metadata_operation = use_operation(LOAD_METADATA_KEY)


@dataclass(frozen=True)
class LoadMetadataInput:
    metadata: Metadata


async def load_metadata_handler(
    operation: Operation[LoadMetadataInput],
    metaplex: Metaplex,
    scope: CancellationScope,
) -> Metadata:
    """json is None when the URI cannot be fetched or parsed; json_loaded is True either way."""
    metadata = operation.input.metadata
    json = await metaplex.storage().download_json(metadata.uri)
    scope.throw_if_canceled()
    return with_json(metadata, json)

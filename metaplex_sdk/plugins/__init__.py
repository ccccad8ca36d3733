"""Default plugins installed by Metaplex.make()."""

from __future__ import annotations

from metaplex_sdk.plugins.nft_module import nft_module
from metaplex_sdk.plugins.token_module import token_module


def core_plugins() -> list:
    return [token_module(), nft_module()]

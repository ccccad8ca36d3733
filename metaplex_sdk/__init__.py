"""
metaplex_sdk: Python client for Metaplex token and NFT programs on Solana.

    mx = Metaplex.from_settings()
    created = await mx.nfts().create("My NFT", "https://...", 500)
    nft = await mx.nfts().find_by_mint(created.mint_address)
"""

from metaplex_sdk.core.amount import Amount, lamports, sol, token
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.metaplex import Metaplex, MetaplexPlugin
from metaplex_sdk.mx_logging import configure_logging
from metaplex_sdk.rpc.client import ConfirmOptions

__version__ = "0.1.0"

__all__ = [
    "Amount",
    "CancellationScope",
    "ConfirmOptions",
    "Metaplex",
    "MetaplexPlugin",
    "__version__",
    "configure_logging",
    "lamports",
    "sol",
    "token",
]

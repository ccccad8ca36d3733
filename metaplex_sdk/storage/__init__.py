"""Off-chain storage access (JSON metadata documents)."""

from metaplex_sdk.storage.json_loader import HttpJsonLoader

__all__ = ["HttpJsonLoader"]

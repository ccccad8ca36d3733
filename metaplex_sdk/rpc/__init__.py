"""RPC access: transaction submission, confirmation and account reads."""

from metaplex_sdk.rpc.client import (
    ConfirmOptions,
    RpcClient,
    SendAndConfirmTransactionResponse,
    UnparsedAccount,
)

__all__ = [
    "ConfirmOptions",
    "RpcClient",
    "SendAndConfirmTransactionResponse",
    "UnparsedAccount",
]

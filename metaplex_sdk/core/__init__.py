"""
Core building blocks: operations and their registry, the transaction builder,
program registry, PDAs, amounts and the exception taxonomy.

Nothing here knows about a specific on-chain program; plugins build on it.
"""

from metaplex_sdk.core.amount import Amount, Currency, lamports, sol, token
from metaplex_sdk.core.exceptions import (
    AccountNotFoundError,
    ConfirmationTimeoutError,
    DuplicateInstructionKeyError,
    MetaplexError,
    MissingFeePayerError,
    MissingIdentityError,
    OperationAlreadyRegisteredError,
    OperationCanceledError,
    ProgramLogicError,
    ProgramNotRegisteredError,
    RpcSubmissionError,
    UnexpectedAccountError,
    UnregisteredOperationError,
    ValidationError,
)
from metaplex_sdk.core.operation import (
    Operation,
    OperationConstructor,
    OperationRegistry,
    use_operation,
)
from metaplex_sdk.core.pda import Pda, find_pda
from metaplex_sdk.core.program import GpaBuilder, Program, ProgramRegistry
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder

__all__ = [
    "AccountNotFoundError",
    "Amount",
    "CancellationScope",
    "ConfirmationTimeoutError",
    "Currency",
    "DuplicateInstructionKeyError",
    "GpaBuilder",
    "InstructionWithSigners",
    "MetaplexError",
    "MissingFeePayerError",
    "MissingIdentityError",
    "Operation",
    "OperationAlreadyRegisteredError",
    "OperationCanceledError",
    "OperationConstructor",
    "OperationRegistry",
    "Pda",
    "Program",
    "ProgramLogicError",
    "ProgramNotRegisteredError",
    "ProgramRegistry",
    "RpcSubmissionError",
    "TransactionBuilder",
    "UnexpectedAccountError",
    "UnregisteredOperationError",
    "ValidationError",
    "find_pda",
    "lamports",
    "sol",
    "token",
    "use_operation",
]

"""
SDK exceptions.

Responsibilities:
- Define the error taxonomy callers can catch: validation, dispatch,
  submission, confirmation and program-logic failures.
- Carry structured context (program logs, signature, error code) so callers
  and the program registry can translate failures without parsing messages.
"""

from __future__ import annotations

from typing import Any


class MetaplexError(Exception):
    """Base class for every error raised by the SDK."""


class ValidationError(MetaplexError):
    """Malformed or missing input, detected before any network call."""


class MissingFeePayerError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Transaction builder has no fee payer; call set_fee_payer() before sending")


class DuplicateInstructionKeyError(ValidationError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Instruction key {key!r} was already added to this transaction builder")
        self.key = key


class MissingIdentityError(ValidationError):
    def __init__(self) -> None:
        super().__init__("No identity signer configured; pass identity= or set METAPLEX_IDENTITY_KEYPAIR")


class UnregisteredOperationError(MetaplexError):
    def __init__(self, key: str) -> None:
        super().__init__(f"No operation handler registered for {key!r}")
        self.key = key


class OperationAlreadyRegisteredError(MetaplexError):
    def __init__(self, key: str) -> None:
        super().__init__(f"An operation handler is already registered for {key!r}")
        self.key = key


class OperationCanceledError(MetaplexError):
    def __init__(self, reason: str | None = None) -> None:
        super().__init__(reason or "Operation was canceled")
        self.reason = reason


class ProgramNotRegisteredError(MetaplexError):
    def __init__(self, name_or_address: str) -> None:
        super().__init__(f"No program registered for {name_or_address!r}")
        self.name_or_address = name_or_address


class RpcSubmissionError(MetaplexError):
    """
    The RPC node or the ledger rejected a transaction.

    logs holds the program logs returned with the rejection (simulation logs
    for preflight failures); error holds the raw transport/ledger error.
    """

    def __init__(
        self,
        message: str,
        *,
        error: Any = None,
        logs: list[str] | None = None,
        signature: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.logs = list(logs or [])
        self.signature = signature


class ConfirmationTimeoutError(MetaplexError):
    """Submitted, but the requested commitment was not observed within the budget."""

    def __init__(self, signature: str, commitment: str, timeout_sec: float) -> None:
        super().__init__(
            f"Transaction {signature} not {commitment} after {timeout_sec:.1f}s; it may still land"
        )
        self.signature = signature
        self.commitment = commitment
        self.timeout_sec = timeout_sec


class ProgramLogicError(MetaplexError):
    """An on-chain program rejected an instruction; derived from program logs."""

    def __init__(
        self,
        program_name: str,
        code: int,
        name: str,
        message: str,
        *,
        logs: list[str] | None = None,
    ) -> None:
        super().__init__(f"{program_name} error {code} ({name}): {message}")
        self.program_name = program_name
        self.code = code
        self.name = name
        self.logs = list(logs or [])


class AccountNotFoundError(MetaplexError):
    def __init__(self, address: Any, account_type: str | None = None) -> None:
        label = account_type or "account"
        super().__init__(f"The {label} at {address} was not found")
        self.address = address
        self.account_type = account_type


class UnexpectedAccountError(MetaplexError):
    """Account exists but is owned by another program or has the wrong discriminator."""

    def __init__(self, address: Any, expected_type: str, reason: str) -> None:
        super().__init__(f"Account {address} is not a valid {expected_type}: {reason}")
        self.address = address
        self.expected_type = expected_type
        self.reason = reason

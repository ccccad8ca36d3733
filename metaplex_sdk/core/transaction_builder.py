"""
Transaction builder: compose instructions into one atomic transaction.

Responsibilities:
- Accumulate labelled instructions (InstructionWithSigners) in insertion order.
- Splice nested builders at the insertion point (their descriptors are copied,
  the nested builder is not referenced afterwards).
- Track the fee payer and every signer the instructions require.
- Carry a side-channel context (addresses computed while building that the
  caller needs before or after sending).
- Hand the result to the RPC layer exactly once via send_and_confirm().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from solders.hash import Hash
from solders.instruction import Instruction
from solders.transaction import Transaction

from metaplex_sdk.core.exceptions import (
    DuplicateInstructionKeyError,
    MissingFeePayerError,
    ValidationError,
)
from metaplex_sdk.core.signer import dedupe_signers

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex
    from metaplex_sdk.rpc.client import ConfirmOptions, SendAndConfirmTransactionResponse

C = TypeVar("C")


@dataclass(frozen=True)
class InstructionWithSigners:
    instruction: Instruction
    signers: tuple[Any, ...] = field(default_factory=tuple)
    key: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of signers, store a tuple.
        object.__setattr__(self, "signers", tuple(self.signers))


class TransactionBuilder(Generic[C]):
    def __init__(self) -> None:
        self._records: list[InstructionWithSigners] = []
        self._fee_payer: Any = None
        self._context: C | None = None
        self._consumed = False

    @classmethod
    def make(cls) -> TransactionBuilder[Any]:
        return cls()

    def _ensure_open(self) -> None:
        if self._consumed:
            raise ValidationError("Transaction builder was already sent; build a new one to resubmit")

    def add(self, *items: InstructionWithSigners | TransactionBuilder[Any]) -> TransactionBuilder[C]:
        """
        Append instructions or splice in every instruction of nested builders.

        All-or-nothing: a duplicate key anywhere in items leaves the builder unchanged.
        """
        self._ensure_open()
        incoming: list[InstructionWithSigners] = []
        for item in items:
            if isinstance(item, TransactionBuilder):
                incoming.extend(item.get_instructions_with_signers())
            else:
                incoming.append(item)

        keys = {record.key for record in self._records if record.key is not None}
        for record in incoming:
            if record.key is None:
                continue
            if record.key in keys:
                raise DuplicateInstructionKeyError(record.key)
            keys.add(record.key)

        self._records.extend(incoming)
        return self

    def set_fee_payer(self, fee_payer: Any) -> TransactionBuilder[C]:
        self._ensure_open()
        self._fee_payer = fee_payer
        return self

    def get_fee_payer(self) -> Any:
        return self._fee_payer

    def set_context(self, context: C) -> TransactionBuilder[C]:
        self._context = context
        return self

    def get_context(self) -> C | None:
        return self._context

    def get_instructions_with_signers(self) -> list[InstructionWithSigners]:
        return list(self._records)

    def get_instructions(self) -> list[Instruction]:
        return [record.instruction for record in self._records]

    def get_instruction_keys(self) -> list[str | None]:
        return [record.key for record in self._records]

    def get_signers(self) -> list[Any]:
        """Every required signer, fee payer first, one per public key."""
        signers: list[Any] = []
        if self._fee_payer is not None:
            signers.append(self._fee_payer)
        for record in self._records:
            signers.extend(record.signers)
        return dedupe_signers(signers)

    def is_empty(self) -> bool:
        return not self._records

    @property
    def consumed(self) -> bool:
        return self._consumed

    def to_transaction(self, recent_blockhash: Hash) -> Transaction:
        """Build and sign the transaction. Requires a fee payer."""
        if self._fee_payer is None:
            raise MissingFeePayerError()
        return Transaction.new_signed_with_payer(
            self.get_instructions(),
            self._fee_payer.pubkey(),
            self.get_signers(),
            recent_blockhash,
        )

    def mark_consumed(self) -> None:
        self._consumed = True

    async def send_and_confirm(
        self,
        metaplex: Metaplex,
        confirm_options: ConfirmOptions | None = None,
    ) -> SendAndConfirmTransactionResponse:
        self._ensure_open()
        if self._fee_payer is None:
            raise MissingFeePayerError()
        if self.is_empty():
            raise ValidationError("Transaction builder has no instructions")
        return await metaplex.rpc().send_and_confirm_transaction(self, confirm_options)

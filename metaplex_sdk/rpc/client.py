"""
RPC layer: submit, confirm and read accounts through solana-py's AsyncClient.

Submission failures become RpcSubmissionError carrying the simulation or
ledger logs (fetched with getTransaction when the failure lands on chain), then
pass through the program registry so known program error codes surface as
ProgramLogicError. Confirmation is polled with
getSignatureStatuses until the requested commitment is reached or the budget
runs out (ConfirmationTimeoutError). No automatic retries.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Sequence

from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException
from solana.rpc.types import MemcmpOpts, TxOpts
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction

from metaplex_sdk.core.exceptions import ConfirmationTimeoutError, RpcSubmissionError
from metaplex_sdk.mx_logging import get_logger

if TYPE_CHECKING:
    from metaplex_sdk.core.transaction_builder import TransactionBuilder
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}
MAX_MULTIPLE_ACCOUNTS = 100


@dataclass(frozen=True)
class ConfirmOptions:
    """Per-call overrides; None falls back to Settings."""

    commitment: str | None = None
    skip_preflight: bool | None = None
    timeout_sec: float | None = None
    poll_interval_sec: float | None = None


@dataclass(frozen=True)
class SendAndConfirmTransactionResponse:
    signature: Signature
    confirmation_status: str
    slot: int | None
    logs: list[str]


@dataclass(frozen=True)
class UnparsedAccount:
    address: Pubkey
    data: bytes
    owner: Pubkey
    lamports: int
    executable: bool = False

    @classmethod
    def from_rpc(cls, address: Pubkey, account: Any) -> UnparsedAccount:
        return cls(
            address=address,
            data=bytes(account.data),
            owner=account.owner,
            lamports=int(account.lamports),
            executable=bool(getattr(account, "executable", False)),
        )


def _logs_from_rpc_exception(exc: RPCException) -> list[str]:
    """Preflight failures carry simulation logs in args[0].data.logs."""
    payload = exc.args[0] if exc.args else None
    data = getattr(payload, "data", None)
    if data is None and isinstance(payload, dict):
        data = payload.get("data")
    logs = data.get("logs") if isinstance(data, dict) else getattr(data, "logs", None)
    return [str(line) for line in (logs or [])]


def _confirmation_name(status: Any) -> str:
    """Normalize TransactionConfirmationStatus (or a plain string) to processed|confirmed|finalized."""
    raw = getattr(status, "confirmation_status", None)
    if raw is None:
        # Nodes report confirmations=None once a slot is rooted.
        return "finalized" if getattr(status, "confirmations", 0) is None else "processed"
    return str(raw).rsplit(".", 1)[-1].lower()


def _at_least_confirmed(commitment: str) -> str:
    return "confirmed" if commitment == "processed" else commitment


class RpcClient:
    def __init__(self, metaplex: Metaplex) -> None:
        self._metaplex = metaplex

    @property
    def connection(self) -> Any:
        return self._metaplex.connection

    def _resolve_options(self, options: ConfirmOptions | None) -> tuple[str, bool, float, float]:
        settings = self._metaplex.settings
        options = options or ConfirmOptions()
        commitment = options.commitment or settings.commitment
        skip_preflight = settings.skip_preflight if options.skip_preflight is None else options.skip_preflight
        timeout = options.timeout_sec or settings.confirm_timeout_sec
        interval = options.poll_interval_sec or settings.confirm_poll_interval_sec
        return commitment, skip_preflight, timeout, interval

    def _resolve(self, error: RpcSubmissionError) -> Exception:
        return self._metaplex.programs().resolve_error(error)

    async def send_and_confirm_transaction(
        self,
        builder: TransactionBuilder[Any],
        options: ConfirmOptions | None = None,
    ) -> SendAndConfirmTransactionResponse:
        commitment, skip_preflight, timeout, interval = self._resolve_options(options)
        blockhash_resp = await self.connection.get_latest_blockhash(commitment)
        transaction = builder.to_transaction(blockhash_resp.value.blockhash)
        builder.mark_consumed()
        signature = await self.send_transaction(
            transaction,
            skip_preflight=skip_preflight,
            preflight_commitment=commitment,
            instruction_keys=builder.get_instruction_keys(),
        )
        status, slot = await self.confirm_transaction(
            signature, commitment=commitment, timeout_sec=timeout, poll_interval_sec=interval
        )
        logs = await self.get_transaction_logs(signature, commitment)
        return SendAndConfirmTransactionResponse(
            signature=signature,
            confirmation_status=status,
            slot=slot,
            logs=logs,
        )

    async def send_transaction(
        self,
        transaction: Transaction,
        *,
        skip_preflight: bool = False,
        preflight_commitment: str = "confirmed",
        instruction_keys: Sequence[str | None] = (),
    ) -> Signature:
        opts = TxOpts(
            skip_confirmation=True,
            skip_preflight=skip_preflight,
            preflight_commitment=preflight_commitment,
        )
        try:
            resp = await self.connection.send_raw_transaction(bytes(transaction), opts=opts)
        except RPCException as e:
            logs = _logs_from_rpc_exception(e)
            logger.warning(
                "rpc_tx_rejected",
                error=str(e),
                log_count=len(logs),
                instruction_keys=list(instruction_keys),
            )
            error = RpcSubmissionError(
                f"Transaction rejected: {e}", error=e.args[0] if e.args else e, logs=logs
            )
            raise self._resolve(error) from e
        except SolanaRpcException as e:
            logger.warning("rpc_tx_transport_failed", error=str(e))
            raise RpcSubmissionError(f"Transaction could not be submitted: {e}", error=e) from e
        signature = resp.value
        logger.info(
            "rpc_tx_sent",
            signature=str(signature),
            instruction_count=len(instruction_keys),
            instruction_keys=list(instruction_keys),
        )
        return signature

    async def confirm_transaction(
        self,
        signature: Signature,
        *,
        commitment: str = "confirmed",
        timeout_sec: float = 60.0,
        poll_interval_sec: float = 1.0,
    ) -> tuple[str, int | None]:
        """Poll until signature reaches commitment. Returns (confirmation status, slot)."""
        required = COMMITMENT_RANK.get(commitment, COMMITMENT_RANK["confirmed"])
        deadline = time.monotonic() + timeout_sec
        while True:
            try:
                resp = await self.connection.get_signature_statuses([signature])
                statuses = resp.value or []
                status = statuses[0] if statuses else None
            except SolanaRpcException as e:
                logger.warning("rpc_tx_confirm_poll_error", signature=str(signature), error=str(e))
                status = None
            if status is not None:
                err = getattr(status, "err", None)
                if err is not None:
                    logs = await self.get_transaction_logs(signature, _at_least_confirmed(commitment))
                    logger.warning("rpc_tx_failed", signature=str(signature), err=str(err), logs=logs)
                    raise self._resolve(
                        RpcSubmissionError(
                            f"Transaction {signature} failed: {err}",
                            error=err,
                            logs=logs,
                            signature=str(signature),
                        )
                    )
                name = _confirmation_name(status)
                if COMMITMENT_RANK.get(name, -1) >= required:
                    logger.info("rpc_tx_confirmed", signature=str(signature), confirmation_status=name)
                    return name, getattr(status, "slot", None)
            if time.monotonic() >= deadline:
                break
            await asyncio.sleep(poll_interval_sec)
        logger.warning(
            "rpc_tx_confirm_timeout",
            signature=str(signature),
            commitment=commitment,
            timeout_sec=timeout_sec,
        )
        raise ConfirmationTimeoutError(str(signature), commitment, timeout_sec)

    async def get_transaction_logs(self, signature: Signature, commitment: str = "confirmed") -> list[str]:
        """Raw program logs of a landed transaction; empty when unavailable."""
        if commitment == "processed":
            # getTransaction only serves confirmed or finalized transactions.
            return []
        try:
            resp = await self.connection.get_transaction(
                signature, commitment=commitment, max_supported_transaction_version=0
            )
        except (SolanaRpcException, RPCException) as e:
            logger.warning("rpc_tx_logs_unavailable", signature=str(signature), error=str(e))
            return []
        value = resp.value
        if value is None:
            logger.debug("rpc_tx_logs_not_indexed", signature=str(signature))
            return []
        meta = getattr(getattr(value, "transaction", None), "meta", None)
        logs = getattr(meta, "log_messages", None)
        return [str(line) for line in (logs or [])]

    async def get_account(self, address: Pubkey, commitment: str | None = None) -> UnparsedAccount | None:
        resp = await self.connection.get_account_info(
            address, commitment=commitment or self._metaplex.settings.commitment
        )
        if resp.value is None:
            return None
        return UnparsedAccount.from_rpc(address, resp.value)

    async def get_multiple_accounts(
        self,
        addresses: Sequence[Pubkey],
        commitment: str | None = None,
    ) -> list[UnparsedAccount | None]:
        """Accounts in the order requested; None where an account does not exist."""
        out: list[UnparsedAccount | None] = []
        for i in range(0, len(addresses), MAX_MULTIPLE_ACCOUNTS):
            chunk = list(addresses[i : i + MAX_MULTIPLE_ACCOUNTS])
            resp = await self.connection.get_multiple_accounts(
                chunk, commitment=commitment or self._metaplex.settings.commitment
            )
            for address, account in zip(chunk, resp.value):
                out.append(None if account is None else UnparsedAccount.from_rpc(address, account))
        return out

    async def get_program_accounts(
        self,
        program_id: Pubkey,
        *,
        filters: Sequence[MemcmpOpts | int] = (),
        commitment: str | None = None,
    ) -> list[UnparsedAccount]:
        resp = await self.connection.get_program_accounts(
            program_id,
            commitment=commitment or self._metaplex.settings.commitment,
            encoding="base64",
            filters=list(filters),
        )
        accounts = [UnparsedAccount.from_rpc(item.pubkey, item.account) for item in resp.value]
        logger.debug("rpc_gpa_fetched", program=str(program_id), account_count=len(accounts))
        return accounts

    async def get_rent(self, space: int) -> int:
        resp = await self.connection.get_minimum_balance_for_rent_exemption(space)
        return int(resp.value)

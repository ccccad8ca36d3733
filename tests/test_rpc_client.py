"""RPC layer: confirmation polling, rejection and timeouts."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from solana.rpc.core import RPCException
from solders.signature import Signature

from conftest import confirmed_status
from metaplex_sdk.core.exceptions import ConfirmationTimeoutError, RpcSubmissionError
from metaplex_sdk.rpc.client import ConfirmOptions, _confirmation_name, _logs_from_rpc_exception


def test_confirmation_name_normalizes_enum_repr():
    assert _confirmation_name(SimpleNamespace(confirmation_status="TransactionConfirmationStatus.Finalized")) == "finalized"
    assert _confirmation_name(SimpleNamespace(confirmation_status=None, confirmations=None)) == "finalized"
    assert _confirmation_name(SimpleNamespace(confirmation_status=None, confirmations=3)) == "processed"


def test_logs_from_rpc_exception_accepts_dicts():
    exc = RPCException({"message": "failed", "data": {"logs": ["Program log: a"]}})
    assert _logs_from_rpc_exception(exc) == ["Program log: a"]
    assert _logs_from_rpc_exception(RPCException("plain")) == []


def test_confirm_returns_when_commitment_reached(mx, connection):
    connection.statuses = [SimpleNamespace(err=None, confirmation_status="finalized", slot=9, confirmations=None)]
    status, slot = asyncio.run(mx.rpc().confirm_transaction(Signature.default(), commitment="confirmed"))
    assert status == "finalized"
    assert slot == 9


def test_confirm_times_out_when_status_never_arrives(mx, connection):
    connection.statuses = [None]
    with pytest.raises(ConfirmationTimeoutError) as excinfo:
        asyncio.run(
            mx.rpc().confirm_transaction(Signature.default(), timeout_sec=0.05, poll_interval_sec=0.01)
        )
    assert excinfo.value.commitment == "confirmed"
    assert excinfo.value.signature == str(Signature.default())


def test_confirm_times_out_below_requested_commitment(mx, connection):
    connection.statuses = [SimpleNamespace(err=None, confirmation_status="processed", slot=1, confirmations=0)]
    with pytest.raises(ConfirmationTimeoutError):
        asyncio.run(
            mx.rpc().confirm_transaction(
                Signature.default(), commitment="finalized", timeout_sec=0.05, poll_interval_sec=0.01
            )
        )


def test_ledger_error_is_a_submission_error(mx, connection):
    connection.statuses = [SimpleNamespace(err="InstructionError(0, Custom(1))", confirmation_status="confirmed", slot=1)]
    with pytest.raises(RpcSubmissionError) as excinfo:
        asyncio.run(mx.rpc().confirm_transaction(Signature.default()))
    assert excinfo.value.signature == str(Signature.default())


def test_send_and_confirm_uses_confirm_options(mx, connection, identity):
    from solders.system_program import TransferParams, transfer

    from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder

    ix = transfer(TransferParams(from_pubkey=identity.pubkey(), to_pubkey=identity.pubkey(), lamports=1))
    builder = TransactionBuilder.make().set_fee_payer(identity).add(InstructionWithSigners(ix, [identity], "t"))
    connection.statuses = [None]
    with pytest.raises(ConfirmationTimeoutError):
        asyncio.run(builder.send_and_confirm(mx, ConfirmOptions(timeout_sec=0.05, poll_interval_sec=0.01)))
    assert len(connection.sent) == 1


def test_rejected_submission_without_program_error(mx, connection, identity):
    from solders.system_program import TransferParams, transfer

    from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder

    connection.send_error = RPCException({"message": "Blockhash not found", "data": {"logs": []}})
    ix = transfer(TransferParams(from_pubkey=identity.pubkey(), to_pubkey=identity.pubkey(), lamports=1))
    builder = TransactionBuilder.make().set_fee_payer(identity).add(InstructionWithSigners(ix, [identity]))
    with pytest.raises(RpcSubmissionError):
        asyncio.run(builder.send_and_confirm(mx))
    assert "get_signature_statuses" not in connection.calls


def test_get_multiple_accounts_preserves_order(mx, connection):
    from solders.keypair import Keypair

    a, b = Keypair().pubkey(), Keypair().pubkey()
    connection.add_account(b, b"\x01", a)
    accounts = asyncio.run(mx.rpc().get_multiple_accounts([a, b]))
    assert accounts[0] is None
    assert accounts[1].address == b
    assert accounts[1].data == b"\x01"


def test_confirmed_status_fixture_is_confirmed():
    assert _confirmation_name(confirmed_status()) == "confirmed"


def test_ledger_failure_carries_transaction_logs_and_resolves(mx, connection):
    from metaplex_sdk.core.exceptions import ProgramLogicError
    from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID

    logs = [
        f"Program {TOKEN_METADATA_PROGRAM_ID} invoke [1]",
        f"Program {TOKEN_METADATA_PROGRAM_ID} failed: custom program error: 0x7",
    ]
    connection.statuses = [SimpleNamespace(err="InstructionError(0, Custom(7))", confirmation_status="confirmed", slot=3)]
    connection.transaction_logs = logs
    with pytest.raises(ProgramLogicError) as excinfo:
        asyncio.run(mx.rpc().confirm_transaction(Signature.default()))
    assert excinfo.value.name == "UpdateAuthorityIncorrect"
    assert excinfo.value.logs == logs
    assert "get_transaction" in connection.calls


def test_ledger_failure_at_processed_still_fetches_logs(mx, connection):
    connection.statuses = [SimpleNamespace(err="InstructionError(0, Custom(1))", confirmation_status="processed", slot=1)]
    connection.transaction_logs = ["Program log: boom"]
    with pytest.raises(RpcSubmissionError) as excinfo:
        asyncio.run(mx.rpc().confirm_transaction(Signature.default(), commitment="processed"))
    assert excinfo.value.logs == ["Program log: boom"]


def test_transaction_log_fetch_failure_keeps_signature(mx, connection, identity):
    import httpx
    from solana.exceptions import SolanaRpcException
    from solders.system_program import TransferParams, transfer

    from metaplex_sdk.core.transaction_builder import InstructionWithSigners, TransactionBuilder

    connection.transaction_error = SolanaRpcException(httpx.ReadTimeout("timed out"), None, None, SimpleNamespace())
    ix = transfer(TransferParams(from_pubkey=identity.pubkey(), to_pubkey=identity.pubkey(), lamports=1))
    builder = TransactionBuilder.make().set_fee_payer(identity).add(InstructionWithSigners(ix, [identity]))
    response = asyncio.run(builder.send_and_confirm(mx))
    assert response.signature == Signature.default()
    assert response.confirmation_status == "confirmed"
    assert response.logs == []


def test_transaction_logs_not_yet_indexed(mx, connection):
    assert asyncio.run(mx.rpc().get_transaction_logs(Signature.default())) == []
    connection.transaction_logs = ["Program log: ok"]
    assert asyncio.run(mx.rpc().get_transaction_logs(Signature.default())) == ["Program log: ok"]

"""
Pytest fixtures for metaplex_sdk tests.

FakeConnection stands in for solana.rpc.async_api.AsyncClient: accounts live in
a dict, submissions are recorded, and every RPC returns a MagicMock(value=...)
response the way solana-py does.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from spl.token.constants import TOKEN_PROGRAM_ID

from metaplex_sdk.config import Settings
from metaplex_sdk.metaplex import Metaplex
from metaplex_sdk.plugins.nft_module.accounts import EDITION_ACCOUNT, MASTER_EDITION_ACCOUNT, METADATA_ACCOUNT
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID
from metaplex_sdk.plugins.token_module.accounts import MINT_LAYOUT, TOKEN_LAYOUT
from metaplex_sdk.storage.json_loader import HttpJsonLoader

METADATA_ACCOUNT_SIZE = 679
MASTER_EDITION_ACCOUNT_SIZE = 282
EDITION_ACCOUNT_SIZE = 241


def confirmed_status(slot: int = 1) -> SimpleNamespace:
    return SimpleNamespace(err=None, confirmation_status="confirmed", slot=slot, confirmations=1)


class FakeConnection:
    def __init__(self) -> None:
        self.accounts: dict[Pubkey, SimpleNamespace] = {}
        self.sent: list[bytes] = []
        self.calls: list[str] = []
        self.statuses: list = [confirmed_status()]
        self.send_error: Exception | None = None
        self.transaction_logs: list[str] | None = None
        self.transaction_error: Exception | None = None
        self.program_accounts: list = []
        self.gpa_filters: list = []
        self.rent = 1_461_600
        self.closed = False

    def add_account(self, address: Pubkey, data: bytes, owner: Pubkey, lamports: int = 1_000_000) -> None:
        self.accounts[address] = SimpleNamespace(data=data, owner=owner, lamports=lamports, executable=False)

    async def get_latest_blockhash(self, commitment=None):
        self.calls.append("get_latest_blockhash")
        return MagicMock(value=MagicMock(blockhash=Hash.default()))

    async def send_raw_transaction(self, txn, opts=None):
        self.calls.append("send_raw_transaction")
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(bytes(txn))
        return MagicMock(value=Signature.default())

    async def get_signature_statuses(self, signatures):
        self.calls.append("get_signature_statuses")
        return MagicMock(value=list(self.statuses))

    async def get_transaction(self, signature, commitment=None, max_supported_transaction_version=None):
        self.calls.append("get_transaction")
        if self.transaction_error is not None:
            raise self.transaction_error
        if self.transaction_logs is None:
            return MagicMock(value=None)
        meta = SimpleNamespace(log_messages=list(self.transaction_logs))
        return MagicMock(value=SimpleNamespace(transaction=SimpleNamespace(meta=meta)))

    async def get_account_info(self, address, commitment=None):
        self.calls.append("get_account_info")
        return MagicMock(value=self.accounts.get(address))

    async def get_multiple_accounts(self, addresses, commitment=None):
        self.calls.append("get_multiple_accounts")
        return MagicMock(value=[self.accounts.get(address) for address in addresses])

    async def get_program_accounts(self, program_id, commitment=None, encoding=None, filters=None):
        self.calls.append("get_program_accounts")
        self.gpa_filters = list(filters or [])
        return MagicMock(value=list(self.program_accounts))

    async def get_minimum_balance_for_rent_exemption(self, space):
        self.calls.append("get_minimum_balance_for_rent_exemption")
        return MagicMock(value=self.rent)

    async def close(self):
        self.closed = True


def metadata_account_bytes(
    mint: Pubkey,
    update_authority: Pubkey,
    *,
    name: str = "Some NFT",
    symbol: str = "",
    uri: str = "https://example.invalid/nft.json",
    seller_fee_basis_points: int = 200,
    creators: list[dict] | None = None,
    uses: dict | None = None,
) -> bytes:
    """Metadata as the program stores it: strings NUL-padded to their maximum length."""
    if creators is None:
        creators = [{"address": update_authority, "verified": True, "share": 100}]
    raw = METADATA_ACCOUNT.build(
        {
            "key": 4,
            "update_authority": update_authority,
            "mint": mint,
            "data": {
                "name": name.ljust(32, "\x00"),
                "symbol": symbol.ljust(10, "\x00"),
                "uri": uri.ljust(200, "\x00"),
                "seller_fee_basis_points": seller_fee_basis_points,
                "creators": creators,
            },
            "primary_sale_happened": False,
            "is_mutable": True,
            "edition_nonce": 254,
            "token_standard": 0,
            "collection": None,
            "uses": uses,
        }
    )
    return raw.ljust(METADATA_ACCOUNT_SIZE, b"\x00")


def mint_account_bytes(authority: Pubkey | None, supply: int = 1, decimals: int = 0) -> bytes:
    return MINT_LAYOUT.build(
        {
            "mint_authority_option": 1 if authority else 0,
            "mint_authority": authority or Pubkey.default(),
            "supply": supply,
            "decimals": decimals,
            "is_initialized": True,
            "freeze_authority_option": 1 if authority else 0,
            "freeze_authority": authority or Pubkey.default(),
        }
    )


def token_account_bytes(mint: Pubkey, owner: Pubkey, amount: int = 1) -> bytes:
    return TOKEN_LAYOUT.build(
        {
            "mint": mint,
            "owner": owner,
            "amount": amount,
            "delegate_option": 0,
            "delegate": Pubkey.default(),
            "state": 1,
            "is_native_option": 0,
            "is_native": 0,
            "delegated_amount": 0,
            "close_authority_option": 0,
            "close_authority": Pubkey.default(),
        }
    )


def master_edition_account_bytes(supply: int = 0, max_supply: int | None = 0) -> bytes:
    raw = MASTER_EDITION_ACCOUNT.build({"key": 6, "supply": supply, "max_supply": max_supply})
    return raw.ljust(MASTER_EDITION_ACCOUNT_SIZE, b"\x00")


def print_edition_account_bytes(parent: Pubkey, number: int) -> bytes:
    raw = EDITION_ACCOUNT.build({"key": 1, "parent": parent, "edition": number})
    return raw.ljust(EDITION_ACCOUNT_SIZE, b"\x00")


def add_nft_accounts(conn: FakeConnection, mint: Pubkey, update_authority: Pubkey, *, edition: bool = True, **kw) -> None:
    from metaplex_sdk.plugins.nft_module.pdas import find_master_edition_pda, find_metadata_pda

    edition_address = find_master_edition_pda(mint).address
    conn.add_account(
        find_metadata_pda(mint).address,
        metadata_account_bytes(mint, update_authority, **kw),
        TOKEN_METADATA_PROGRAM_ID,
    )
    conn.add_account(mint, mint_account_bytes(edition_address if edition else update_authority), TOKEN_PROGRAM_ID)
    if edition:
        conn.add_account(edition_address, master_edition_account_bytes(), TOKEN_METADATA_PROGRAM_ID)


@pytest.fixture
def identity():
    return Keypair()


@pytest.fixture
def settings():
    return Settings(
        rpc_url="http://localhost:8899",
        commitment="confirmed",
        confirm_timeout_sec=1.0,
        confirm_poll_interval_sec=0.01,
    )


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def json_documents():
    """uri -> JSON body served by the mock HTTP transport; anything else is a 404."""
    return {}


@pytest.fixture
def json_loader(json_documents):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json_documents.get(str(request.url))
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, json=body)

    return HttpJsonLoader(timeout=1.0, transport=httpx.MockTransport(handler))


@pytest.fixture
def mx(connection, identity, settings, json_loader):
    return Metaplex.make(connection, identity=identity, settings=settings, json_loader=json_loader)

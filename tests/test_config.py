"""Environment-driven configuration."""

from __future__ import annotations

import json

import base58
import pytest
from solders.keypair import Keypair

from metaplex_sdk.config import Settings, load_settings
from metaplex_sdk.config.env import (
    DEVNET_RPC_URL,
    get_commitment,
    get_solana_rpc_url,
    load_keypair,
    mask_rpc_url,
)

ENV_VARS = (
    "SOLANA_NETWORK",
    "SOLANA_CLUSTER",
    "SOLANA_RPC_URL",
    "HELIUS_API_KEY",
    "SOLANA_COMMITMENT",
    "METAPLEX_IDENTITY_KEYPAIR",
    "CONFIRM_TIMEOUT_SEC",
    "SKIP_PREFLIGHT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_rpc_url_defaults_to_devnet():
    assert get_solana_rpc_url() == DEVNET_RPC_URL


def test_explicit_rpc_url_wins(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://localhost:8899")
    monkeypatch.setenv("HELIUS_API_KEY", "secret")
    assert get_solana_rpc_url() == "http://localhost:8899"


def test_helius_fallback_and_masking(monkeypatch):
    monkeypatch.setenv("SOLANA_NETWORK", "mainnet")
    monkeypatch.setenv("HELIUS_API_KEY", "secret")
    url = get_solana_rpc_url()
    assert url.startswith("https://mainnet.helius-rpc.com/")
    assert mask_rpc_url(url).endswith("api-key=***")
    assert "secret" not in mask_rpc_url(url)


def test_unknown_commitment_falls_back(monkeypatch):
    monkeypatch.setenv("SOLANA_COMMITMENT", "eventually")
    assert get_commitment() == "confirmed"


def test_load_settings(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "http://localhost:8899")
    monkeypatch.setenv("SOLANA_COMMITMENT", "finalized")
    monkeypatch.setenv("CONFIRM_TIMEOUT_SEC", "not-a-number")
    monkeypatch.setenv("SKIP_PREFLIGHT", "true")
    settings = load_settings()
    assert settings.rpc_url == "http://localhost:8899"
    assert settings.commitment == "finalized"
    assert settings.confirm_timeout_sec == 60.0
    assert settings.skip_preflight is True
    assert settings.identity is None


def test_settings_normalizes_invalid_values():
    settings = Settings(rpc_url="http://x", commitment="bogus", confirm_timeout_sec=-1)
    assert settings.commitment == "confirmed"
    assert settings.confirm_timeout_sec == 60.0


def test_load_keypair_formats():
    kp = Keypair()
    assert load_keypair(json.dumps(list(bytes(kp)))).pubkey() == kp.pubkey()
    assert load_keypair(base58.b58encode(bytes(kp)).decode()).pubkey() == kp.pubkey()
    with pytest.raises(ValueError):
        load_keypair("not-a-key")


def test_identity_from_env(monkeypatch):
    kp = Keypair()
    monkeypatch.setenv("METAPLEX_IDENTITY_KEYPAIR", json.dumps(list(bytes(kp))))
    assert load_settings().identity.pubkey() == kp.pubkey()

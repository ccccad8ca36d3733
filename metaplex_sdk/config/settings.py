"""
SDK settings.

Responsibilities:
- Collect configuration from environment variables and .env files (see env.py).
- Provide defaults for optional values (commitment, confirmation budget, JSON fetch timeout).
- Expose a typed Settings object consumed by Metaplex.from_settings() and the RPC layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from solders.keypair import Keypair

from metaplex_sdk.config.env import (
    COMMITMENT_LEVELS,
    DEFAULT_COMMITMENT,
    DEFAULT_CONFIRM_POLL_INTERVAL_SEC,
    DEFAULT_CONFIRM_TIMEOUT_SEC,
    DEFAULT_JSON_FETCH_TIMEOUT_SEC,
    get_commitment,
    get_identity_keypair,
    get_solana_network,
    get_solana_rpc_url,
    parse_bool_env,
    parse_float_env,
)


@dataclass
class Settings:
    """Resolved SDK configuration. Build explicitly in tests; use get_settings() elsewhere."""

    rpc_url: str
    network: str = "devnet"
    commitment: str = DEFAULT_COMMITMENT
    confirm_timeout_sec: float = DEFAULT_CONFIRM_TIMEOUT_SEC
    confirm_poll_interval_sec: float = DEFAULT_CONFIRM_POLL_INTERVAL_SEC
    json_fetch_timeout_sec: float = DEFAULT_JSON_FETCH_TIMEOUT_SEC
    skip_preflight: bool = False
    identity: Keypair | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.commitment not in COMMITMENT_LEVELS:
            self.commitment = DEFAULT_COMMITMENT
        if self.confirm_timeout_sec <= 0:
            self.confirm_timeout_sec = DEFAULT_CONFIRM_TIMEOUT_SEC
        if self.confirm_poll_interval_sec <= 0:
            self.confirm_poll_interval_sec = DEFAULT_CONFIRM_POLL_INTERVAL_SEC
        if self.json_fetch_timeout_sec <= 0:
            self.json_fetch_timeout_sec = DEFAULT_JSON_FETCH_TIMEOUT_SEC


def load_settings() -> Settings:
    """Build Settings from the current environment (uncached)."""
    return Settings(
        rpc_url=get_solana_rpc_url(),
        network=get_solana_network(),
        commitment=get_commitment(),
        confirm_timeout_sec=parse_float_env("CONFIRM_TIMEOUT_SEC", DEFAULT_CONFIRM_TIMEOUT_SEC),
        confirm_poll_interval_sec=parse_float_env(
            "CONFIRM_POLL_INTERVAL_SEC", DEFAULT_CONFIRM_POLL_INTERVAL_SEC
        ),
        json_fetch_timeout_sec=parse_float_env("JSON_FETCH_TIMEOUT_SEC", DEFAULT_JSON_FETCH_TIMEOUT_SEC),
        skip_preflight=parse_bool_env("SKIP_PREFLIGHT", False),
        identity=get_identity_keypair(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the process settings, loaded once from the environment.

    Returns:
        Settings with rpc_url, network, commitment, confirmation budget,
        JSON fetch timeout and the optional identity keypair.
    """
    return load_settings()

"""
Environment variable loading and validation for the Metaplex SDK.

- SOLANA_NETWORK: devnet | mainnet (default: devnet)
- SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL when SOLANA_RPC_URL is unset)
- SOLANA_COMMITMENT: processed | confirmed | finalized (default: confirmed)
- METAPLEX_IDENTITY_KEYPAIR: base58 secret key or JSON array of 64 bytes
- Loads .env from project root when available.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import base58
from dotenv import load_dotenv
from solders.keypair import Keypair

from metaplex_sdk.mx_logging import get_logger

logger = get_logger(__name__)

# Project root: config is metaplex_sdk/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEVNET_RPC_URL = "https://api.devnet.solana.com"
MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")
DEFAULT_COMMITMENT = "confirmed"
DEFAULT_CONFIRM_TIMEOUT_SEC = 60.0
DEFAULT_CONFIRM_POLL_INTERVAL_SEC = 1.0
DEFAULT_JSON_FETCH_TIMEOUT_SEC = 10.0


def load_sdk_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)


def parse_bool_env(name: str, default: bool = False) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    return default


def parse_float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("config_invalid_float", name=name, value=raw, default=default)
        return default


def get_solana_network() -> str:
    """
    Return SOLANA_NETWORK from env: devnet | mainnet.
    Default: devnet.
    """
    load_sdk_env()
    raw = (os.getenv("SOLANA_NETWORK") or os.getenv("SOLANA_CLUSTER") or "devnet").strip().lower()
    if raw in ("mainnet", "mainnet-beta"):
        return "mainnet"
    return "devnet"


def get_solana_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (network-specific) > devnet/mainnet default.
    """
    load_sdk_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    network = get_solana_network()
    key = (os.getenv("HELIUS_API_KEY") or "").strip()
    if key:
        if network == "devnet":
            return HELIUS_DEVNET_URL_TEMPLATE.format(key=key)
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return DEVNET_RPC_URL if network == "devnet" else MAINNET_RPC_URL


def get_commitment() -> str:
    """Return SOLANA_COMMITMENT; unknown values fall back to confirmed."""
    load_sdk_env()
    raw = (os.getenv("SOLANA_COMMITMENT") or DEFAULT_COMMITMENT).strip().lower()
    if raw not in COMMITMENT_LEVELS:
        logger.warning("config_invalid_commitment", value=raw, default=DEFAULT_COMMITMENT)
        return DEFAULT_COMMITMENT
    return raw


def load_keypair(secret: str) -> Keypair:
    """Load a Keypair from a base58 secret key or a JSON array of 64 bytes."""
    raw = secret.strip()
    if raw.startswith("["):
        try:
            arr = json.loads(raw)
            if len(arr) >= 64:
                return Keypair.from_bytes(bytes(arr[:64]))
        except (json.JSONDecodeError, TypeError, ValueError):
            pass
    try:
        return Keypair.from_bytes(base58.b58decode(raw))
    except ValueError as e:
        logger.warning("config_keypair_load_failed", error=str(e))
        raise ValueError("Invalid METAPLEX_IDENTITY_KEYPAIR") from e


def get_identity_keypair() -> Keypair | None:
    """Return the identity keypair from METAPLEX_IDENTITY_KEYPAIR, or None when unset."""
    load_sdk_env()
    raw = (os.getenv("METAPLEX_IDENTITY_KEYPAIR") or "").strip()
    if not raw:
        return None
    return load_keypair(raw)


def mask_rpc_url(url: str) -> str:
    """Mask API key in URL if present."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url


"""
Configuration management for the Metaplex SDK.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for RPC endpoint, commitment and identity.
"""

from metaplex_sdk.config.settings import Settings, get_settings, load_settings  # noqa: F401

__all__ = ["Settings", "get_settings", "load_settings"]

"""Shared binary layout pieces for account and instruction codecs."""

from __future__ import annotations

from typing import Any

from construct import Adapter, Bytes
from solders.pubkey import Pubkey


class PublicKeyAdapter(Adapter):
    """32 raw bytes <-> solders Pubkey."""

    def _decode(self, obj: bytes, context: Any, path: Any) -> Pubkey:
        return Pubkey.from_bytes(bytes(obj))

    def _encode(self, obj: Pubkey, context: Any, path: Any) -> bytes:
        return bytes(obj)


PUBLIC_KEY = PublicKeyAdapter(Bytes(32))


def remove_empty_chars(value: str) -> str:
    """Strip the NUL padding programs use for fixed-size string fields."""
    return value.replace("\x00", "")

"""Signer helpers. A signer is anything exposing pubkey() and sign_message() (solders Keypair, Presigner)."""

from __future__ import annotations

from typing import Any, Iterable

from solders.pubkey import Pubkey


def is_signer(value: Any) -> bool:
    return callable(getattr(value, "pubkey", None)) and callable(getattr(value, "sign_message", None))


def dedupe_signers(signers: Iterable[Any]) -> list[Any]:
    """Keep the first signer per public key, preserving order."""
    seen: set[Pubkey] = set()
    out: list[Any] = []
    for signer in signers:
        key = signer.pubkey()
        if key in seen:
            continue
        seen.add(key)
        out.append(signer)
    return out

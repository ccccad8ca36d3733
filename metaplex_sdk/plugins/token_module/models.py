"""
Token domain models: Mint and Token snapshots mapped from decoded accounts.

Optional authorities are None when the account's option tag is unset.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from solders.pubkey import Pubkey
from spl.token.constants import WRAPPED_SOL_MINT

from metaplex_sdk.core.amount import SOL, Amount, Currency
from metaplex_sdk.plugins.token_module.pdas import find_associated_token_account_pda

# spl-token AccountState
TOKEN_STATE_UNINITIALIZED = 0
TOKEN_STATE_INITIALIZED = 1
TOKEN_STATE_FROZEN = 2


@dataclass(frozen=True)
class Mint:
    address: Pubkey
    mint_authority_address: Pubkey | None
    freeze_authority_address: Pubkey | None
    decimals: int
    supply: Amount
    is_wrapped_sol: bool
    currency: Currency


@dataclass(frozen=True)
class Token:
    address: Pubkey
    is_associated_token: bool
    mint_address: Pubkey
    owner_address: Pubkey
    amount: int
    """Raw amount in the mint's smallest unit."""
    delegate_address: Pubkey | None
    delegated_amount: int
    close_authority_address: Pubkey | None
    state: int

    @property
    def is_frozen(self) -> bool:
        return self.state == TOKEN_STATE_FROZEN


def _optional_key(tag: int, key: Pubkey) -> Pubkey | None:
    return key if tag else None


def to_mint(address: Pubkey, data: Any) -> Mint:
    is_wrapped_sol = address == WRAPPED_SOL_MINT
    currency = SOL if is_wrapped_sol else Currency(symbol="Token", decimals=data.decimals)
    return Mint(
        address=address,
        mint_authority_address=_optional_key(data.mint_authority_option, data.mint_authority),
        freeze_authority_address=_optional_key(data.freeze_authority_option, data.freeze_authority),
        decimals=data.decimals,
        supply=Amount(basis_points=data.supply, currency=currency),
        is_wrapped_sol=is_wrapped_sol,
        currency=currency,
    )


def to_token(address: Pubkey, data: Any) -> Token:
    ata = find_associated_token_account_pda(data.mint, data.owner)
    return Token(
        address=address,
        is_associated_token=ata.address == address,
        mint_address=data.mint,
        owner_address=data.owner,
        amount=data.amount,
        delegate_address=_optional_key(data.delegate_option, data.delegate),
        delegated_amount=data.delegated_amount,
        close_authority_address=_optional_key(data.close_authority_option, data.close_authority),
        state=data.state,
    )

"""
Token amounts.

Amounts are stored as integer basis points (the raw on-chain u64) together
with their currency, and converted to Decimal only for display or input, so
no float rounding ever reaches an instruction.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from metaplex_sdk.core.exceptions import ValidationError

SOL_DECIMALS = 9


@dataclass(frozen=True)
class Currency:
    symbol: str
    decimals: int
    namespace: str = "spl-token"


SOL = Currency(symbol="SOL", decimals=SOL_DECIMALS, namespace="sol")


@dataclass(frozen=True)
class Amount:
    basis_points: int
    currency: Currency

    def __post_init__(self) -> None:
        if self.basis_points < 0:
            raise ValidationError(f"Amount cannot be negative: {self.basis_points}")

    def to_decimal(self) -> Decimal:
        return Decimal(self.basis_points).scaleb(-self.currency.decimals)

    def __str__(self) -> str:
        return f"{self.to_decimal()} {self.currency.symbol}"


def _to_basis_points(value: int | float | str | Decimal, decimals: int) -> int:
    scaled = Decimal(str(value)).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValidationError(f"{value} has more than {decimals} decimal places")
    return int(scaled)


def token(value: int | float | str | Decimal, decimals: int = 0, symbol: str = "Token") -> Amount:
    """token(1.5, 2) -> 150 basis points of a 2-decimal token."""
    return Amount(
        basis_points=_to_basis_points(value, decimals),
        currency=Currency(symbol=symbol, decimals=decimals),
    )


def sol(value: int | float | str | Decimal) -> Amount:
    return Amount(basis_points=_to_basis_points(value, SOL_DECIMALS), currency=SOL)


def lamports(value: int) -> Amount:
    return Amount(basis_points=int(value), currency=SOL)

"""
Program-derived addresses.

find_pda() is the single entry point for seed-based derivation: it returns
the address together with its canonical bump so callers that need the bump
(e.g. to pass it to an instruction) do not derive twice.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from solders.pubkey import Pubkey


@dataclass(frozen=True)
class Pda:
    address: Pubkey
    bump: int

    def __bytes__(self) -> bytes:
        return bytes(self.address)

    def __str__(self) -> str:
        return str(self.address)


def find_pda(seeds: Sequence[bytes], program_id: Pubkey) -> Pda:
    """Derive the canonical PDA for seeds under program_id. Deterministic, no I/O."""
    address, bump = Pubkey.find_program_address(list(seeds), program_id)
    return Pda(address=address, bump=bump)

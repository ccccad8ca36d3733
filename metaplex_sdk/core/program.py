"""
Program registry: on-chain programs the SDK knows how to talk to.

Each Program entry maps a public key to:
- an error resolver turning a custom program error code (read from the
  failing transaction's logs) into a ProgramLogicError, and
- a GPA resolver returning a get-program-accounts builder for account search.

Plugins register their programs during install(); the RPC layer consults the
registry when a transaction is rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

import base58
from solana.rpc.types import MemcmpOpts
from solders.pubkey import Pubkey

from metaplex_sdk.core.exceptions import (
    ProgramLogicError,
    ProgramNotRegisteredError,
    RpcSubmissionError,
)
from metaplex_sdk.mx_logging import get_logger

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex
    from metaplex_sdk.rpc.client import UnparsedAccount

logger = get_logger(__name__)

# e.g. "Program metaqbxx... failed: custom program error: 0x7"
_CUSTOM_ERROR_LOG = re.compile(r"Program (\w+) failed: custom program error: 0x([0-9a-fA-F]+)")

ErrorResolver = Callable[[int, RpcSubmissionError], "ProgramLogicError | None"]
GpaResolver = Callable[["Metaplex"], "GpaBuilder"]


@dataclass(frozen=True)
class Program:
    name: str
    address: Pubkey
    error_resolver: ErrorResolver | None = None
    gpa_resolver: GpaResolver | None = None


def make_error_resolver(program_name: str, errors: dict[int, tuple[str, str]]) -> ErrorResolver:
    """Build a resolver from a code -> (name, message) table. Unknown codes resolve to None."""

    def resolve(code: int, error: RpcSubmissionError) -> ProgramLogicError | None:
        entry = errors.get(code)
        if entry is None:
            return None
        name, message = entry
        return ProgramLogicError(program_name, code, name, message, logs=error.logs)

    return resolve


def parse_custom_program_error(logs: list[str]) -> tuple[str, int] | None:
    """Return (program address, error code) from the first failing program log line."""
    for line in logs:
        match = _CUSTOM_ERROR_LOG.search(line)
        if match:
            return match.group(1), int(match.group(2), 16)
    return None


class ProgramRegistry:
    def __init__(self) -> None:
        self._programs: list[Program] = []

    def register(self, program: Program) -> None:
        # Later registrations win on lookup, so a plugin can override a default program.
        self._programs.insert(0, program)

    def all(self) -> list[Program]:
        return list(self._programs)

    def get(self, name_or_address: str | Pubkey) -> Program:
        for program in self._programs:
            if isinstance(name_or_address, Pubkey):
                if program.address == name_or_address:
                    return program
            elif name_or_address in (program.name, str(program.address)):
                return program
        raise ProgramNotRegisteredError(str(name_or_address))

    def find(self, name_or_address: str | Pubkey) -> Program | None:
        try:
            return self.get(name_or_address)
        except ProgramNotRegisteredError:
            return None

    def resolve_error(self, error: RpcSubmissionError) -> Exception:
        """
        Translate a rejected transaction into a ProgramLogicError when the logs
        name a registered program and a known error code; otherwise return error.
        """
        parsed = parse_custom_program_error(error.logs)
        if parsed is None:
            return error
        address, code = parsed
        program = self.find(address)
        if program is None or program.error_resolver is None:
            return error
        resolved = program.error_resolver(code, error)
        if resolved is None:
            return error
        logger.info(
            "program_error_resolved",
            program=program.name,
            code=code,
            error_name=resolved.name,
        )
        return resolved


class GpaBuilder:
    """
    get_program_accounts query builder.

    Filters accumulate on a copy, so a base builder can be shared:
        builder.where_key(4).where(offset, pubkey)
    """

    def __init__(self, metaplex: Metaplex, program_id: Pubkey) -> None:
        self._metaplex = metaplex
        self.program_id = program_id
        self._filters: list[MemcmpOpts | int] = []

    def _copy(self) -> GpaBuilder:
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._filters = list(self._filters)
        return clone

    @property
    def filters(self) -> list[MemcmpOpts | int]:
        return list(self._filters)

    def where(self, offset: int, value: bytes | Pubkey | int) -> GpaBuilder:
        """memcmp filter: the account data at offset must equal value (ints are single bytes)."""
        if isinstance(value, int):
            raw = bytes([value])
        else:
            raw = bytes(value)
        clone = self._copy()
        clone._filters.append(MemcmpOpts(offset=offset, bytes=base58.b58encode(raw).decode("ascii")))
        return clone

    def where_size(self, data_size: int) -> GpaBuilder:
        clone = self._copy()
        clone._filters.append(data_size)
        return clone

    async def get(self) -> list[UnparsedAccount]:
        return await self._metaplex.rpc().get_program_accounts(self.program_id, filters=self._filters)


def custom_error_table(entries: list[tuple[int, str, str]]) -> dict[int, tuple[str, str]]:
    return {code: (name, message) for code, name, message in entries}

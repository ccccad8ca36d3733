"""Cooperative cancellation handed to every operation handler."""

from __future__ import annotations

import asyncio

from metaplex_sdk.core.exceptions import OperationCanceledError


class CancellationScope:
    """
    Cancellation flag checked by handlers between suspending steps.

    Cancellation is cooperative: a handler calls throw_if_canceled() after each
    awaited RPC call and before starting the next one. A transaction that has
    already been submitted stays submitted.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_canceled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def throw_if_canceled(self) -> None:
        if self._event.is_set():
            raise OperationCanceledError(self._reason)

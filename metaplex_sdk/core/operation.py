"""
Operations and the handler registry.

An Operation is an immutable request descriptor: a key plus a typed input.
Operations are built through an OperationConstructor returned by
use_operation(key), so the key and the input type always travel together.
Handlers are plain async functions registered once per key on an
OperationRegistry owned by a Metaplex instance; plugins populate the
registry during install() and it is only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, TypeVar

from metaplex_sdk.core.exceptions import (
    OperationAlreadyRegisteredError,
    UnregisteredOperationError,
)
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.mx_logging import bind_operation, get_logger

if TYPE_CHECKING:
    from metaplex_sdk.metaplex import Metaplex

logger = get_logger(__name__)

I = TypeVar("I")


@dataclass(frozen=True)
class Operation(Generic[I]):
    key: str
    input: I


class OperationConstructor(Generic[I]):
    """Factory bound to one operation key: constructor(input) -> Operation."""

    def __init__(self, key: str) -> None:
        self.key = key

    def __call__(self, input: I) -> Operation[I]:
        return Operation(key=self.key, input=input)

    def __repr__(self) -> str:
        return f"OperationConstructor({self.key!r})"


def use_operation(key: str) -> OperationConstructor[Any]:
    return OperationConstructor(key)


OperationHandler = Callable[[Operation[Any], "Metaplex", CancellationScope], Awaitable[Any]]


class OperationRegistry:
    """Maps operation keys to handlers. At most one handler per key."""

    def __init__(self) -> None:
        self._handlers: dict[str, OperationHandler] = {}

    def register(self, constructor: OperationConstructor[Any], handler: OperationHandler) -> None:
        """Bind a handler to the constructor's key. Registering a key twice raises."""
        if constructor.key in self._handlers:
            raise OperationAlreadyRegisteredError(constructor.key)
        self._handlers[constructor.key] = handler
        logger.debug("operation_registered", operation=constructor.key)

    def has(self, key: str) -> bool:
        return key in self._handlers

    def keys(self) -> list[str]:
        return list(self._handlers)

    def get_handler(self, operation: Operation[Any]) -> OperationHandler:
        handler = self._handlers.get(operation.key)
        if handler is None:
            raise UnregisteredOperationError(operation.key)
        return handler

    async def handle(
        self,
        operation: Operation[Any],
        context: Metaplex,
        scope: CancellationScope | None = None,
    ) -> Any:
        """Dispatch operation to its handler and return the handler's output."""
        handler = self.get_handler(operation)
        scope = scope or CancellationScope()
        scope.throw_if_canceled()
        bind_operation(operation.key).debug("operation_dispatched")
        return await handler(operation, context, scope)

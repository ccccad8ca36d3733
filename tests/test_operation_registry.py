"""Operation dispatch: one handler per key, exactly-once invocation, cancellation."""

from __future__ import annotations

import asyncio

import pytest

from metaplex_sdk.core.exceptions import (
    OperationAlreadyRegisteredError,
    OperationCanceledError,
    UnregisteredOperationError,
)
from metaplex_sdk.core.operation import use_operation
from metaplex_sdk.core.scope import CancellationScope
from metaplex_sdk.metaplex import Metaplex

echo_operation = use_operation("EchoOperation")


@pytest.fixture
def bare_mx(connection, identity, settings, json_loader):
    return Metaplex(connection, identity=identity, settings=settings, json_loader=json_loader)


def test_operation_carries_key_and_input():
    op = echo_operation({"value": 1})
    assert op.key == "EchoOperation"
    assert op.input == {"value": 1}


def test_dispatch_invokes_handler_exactly_once(bare_mx):
    calls = []

    async def handler(operation, metaplex, scope):
        calls.append(operation.input)
        assert metaplex is bare_mx
        assert isinstance(scope, CancellationScope)
        return operation.input * 2

    bare_mx.operations().register(echo_operation, handler)
    assert asyncio.run(bare_mx.run(echo_operation(21))) == 42
    assert calls == [21]


def test_unregistered_key_raises(bare_mx):
    with pytest.raises(UnregisteredOperationError) as excinfo:
        asyncio.run(bare_mx.run(echo_operation(1)))
    assert excinfo.value.key == "EchoOperation"


def test_registering_a_key_twice_raises(bare_mx):
    async def handler(operation, metaplex, scope):
        return None

    bare_mx.operations().register(echo_operation, handler)
    with pytest.raises(OperationAlreadyRegisteredError):
        bare_mx.operations().register(echo_operation, handler)


def test_registries_are_per_instance(bare_mx, connection, identity, settings, json_loader):
    async def handler(operation, metaplex, scope):
        return None

    bare_mx.operations().register(echo_operation, handler)
    other = Metaplex(connection, identity=identity, settings=settings, json_loader=json_loader)
    assert not other.operations().has("EchoOperation")


def test_canceled_scope_stops_dispatch(bare_mx):
    calls = []

    async def handler(operation, metaplex, scope):
        calls.append(1)

    bare_mx.operations().register(echo_operation, handler)
    scope = CancellationScope()
    scope.cancel("user aborted")
    with pytest.raises(OperationCanceledError) as excinfo:
        asyncio.run(bare_mx.run(echo_operation(1), scope))
    assert excinfo.value.reason == "user aborted"
    assert calls == []


def test_handler_sees_cancellation_between_steps(bare_mx):
    async def handler(operation, metaplex, scope):
        scope.cancel()
        await asyncio.sleep(0)
        scope.throw_if_canceled()
        return "unreachable"

    bare_mx.operations().register(echo_operation, handler)
    with pytest.raises(OperationCanceledError):
        asyncio.run(bare_mx.run(echo_operation(1)))


def test_make_installs_default_operations(mx):
    keys = mx.operations().keys()
    for key in (
        "CreateNftOperation",
        "CreateSftOperation",
        "FindNftByMetadataOperation",
        "FindNftByMintOperation",
        "FindNftByTokenOperation",
        "FindNftsByMintListOperation",
        "FindNftsByOwnerOperation",
        "FindNftsByCreatorOperation",
        "FindNftsByUpdateAuthorityOperation",
        "LoadMetadataOperation",
        "PrintNewEditionOperation",
        "UpdateNftOperation",
        "UseNftOperation",
        "SendTokensOperation",
        "FindMintByAddressOperation",
        "FindTokenByAddressOperation",
    ):
        assert key in keys


def test_installing_a_plugin_twice_raises(mx):
    from metaplex_sdk.plugins.nft_module import nft_module

    with pytest.raises(OperationAlreadyRegisteredError):
        mx.use(nft_module())

"""Metaplex entry point: identity, plugin wiring and facades."""

from __future__ import annotations

import asyncio

import pytest
from solders.keypair import Keypair

from metaplex_sdk.core.amount import token
from metaplex_sdk.core.exceptions import MissingIdentityError, ValidationError
from metaplex_sdk.metaplex import Metaplex
from metaplex_sdk.plugins.nft_module.gpa import TokenMetadataGpaBuilder
from metaplex_sdk.plugins.nft_module.program import TOKEN_METADATA_PROGRAM_ID


def test_identity_required_before_signing(connection, settings, json_loader):
    mx = Metaplex.make(connection, settings=settings, json_loader=json_loader)
    assert not mx.has_identity()
    with pytest.raises(MissingIdentityError):
        mx.tokens().builders().send(Keypair().pubkey(), token(1))

    kp = Keypair()
    assert mx.set_identity(kp) is mx
    assert mx.identity() is kp


def test_facades_need_their_plugin(connection, identity, settings, json_loader):
    mx = Metaplex(connection, identity=identity, settings=settings, json_loader=json_loader)
    with pytest.raises(ValidationError):
        mx.nfts()
    with pytest.raises(ValidationError):
        mx.tokens()


def test_make_registers_programs(mx):
    names = [program.name for program in mx.programs().all()]
    assert names == ["TokenMetadataProgram", "AssociatedTokenProgram", "TokenProgram"]


def test_gpa_resolver_builds_filters(mx):
    program = mx.programs().get(TOKEN_METADATA_PROGRAM_ID)
    gpa = program.gpa_resolver(mx)
    assert isinstance(gpa, TokenMetadataGpaBuilder)

    mint = Keypair().pubkey()
    by_mint = gpa.where_mint(mint)
    assert [f.offset for f in by_mint.filters] == [0, 33]
    assert by_mint.filters[1].bytes == str(mint)
    # the base builder is untouched
    assert gpa.filters == []


def test_close_releases_connection(mx, connection):
    asyncio.run(mx.close())
    assert connection.closed

"""Off-chain JSON loading never raises; failures yield None."""

from __future__ import annotations

import asyncio

import httpx

from metaplex_sdk.storage.json_loader import HttpJsonLoader


def _loader(handler) -> HttpJsonLoader:
    return HttpJsonLoader(timeout=1.0, transport=httpx.MockTransport(handler))


def test_download_json_returns_object():
    loader = _loader(lambda request: httpx.Response(200, json={"name": "Some NFT"}))
    assert asyncio.run(loader.download_json("https://example.com/a.json")) == {"name": "Some NFT"}


def test_http_error_yields_none():
    loader = _loader(lambda request: httpx.Response(404))
    assert asyncio.run(loader.download_json("https://example.com/missing.json")) is None


def test_invalid_json_yields_none():
    loader = _loader(lambda request: httpx.Response(200, content=b"<html>"))
    assert asyncio.run(loader.download_json("https://example.com/page")) is None


def test_non_object_body_yields_none():
    loader = _loader(lambda request: httpx.Response(200, json=["a", "b"]))
    assert asyncio.run(loader.download_json("https://example.com/list.json")) is None


def test_transport_error_yields_none():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert asyncio.run(_loader(handler).download_json("https://example.invalid/x.json")) is None


def test_unsupported_scheme_skips_request():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={})

    loader = _loader(handler)
    assert asyncio.run(loader.download_json("ipfs://bafy/metadata.json")) is None
    assert asyncio.run(loader.download_json("")) is None
    assert requests == []


def test_malformed_uri_yields_none():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={})

    assert asyncio.run(_loader(handler).download_json("http://[::1/nft.json")) is None
    assert requests == []

"""Tests for HttpTransport: document fetches, requests and action encoding.

Uses respx to intercept httpx traffic; no server involved.
"""

from __future__ import annotations

import json as _json

import httpx
import pytest
import respx
from helpers import document, link

from siren_nav import ActionNotFoundError, Entity, HttpTransport, ResourceCache, TransportConfig
from siren_nav.siren import SIREN_MEDIA_TYPE
from siren_nav.state import NavState, RequestConfig

API = "http://api.test"

_WIDGETS = document(
    links=[link("self", "/widgets")],
    actions=[
        {"name": "create", "href": "/widgets", "method": "POST", "type": "application/json"},
        {"name": "search", "href": "/widgets/search"},
        {"name": "rename", "href": "/widgets", "method": "PUT"},
        {"name": "replace", "href": "/widgets", "method": "PUT", "type": SIREN_MEDIA_TYPE},
    ],
)


def _transport() -> HttpTransport:
    return HttpTransport(config=TransportConfig(base_url=API))


async def _state(transport: HttpTransport, uri: str = "/widgets", **headers: str) -> NavState:
    cache = ResourceCache(transport.fetch_document)
    return NavState.at(uri, API, RequestConfig(base_url=API, headers=headers), cache)


class TestFetchDocument:
    @pytest.mark.asyncio
    @respx.mock
    async def test_parses_siren(self):
        route = respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        async with _transport() as transport:
            doc = await transport.fetch_document("/widgets")
        assert doc.self_href == "/widgets"
        assert route.calls[0].request.headers["Accept"] == SIREN_MEDIA_TYPE

    @pytest.mark.asyncio
    @respx.mock
    async def test_error_status_raises(self):
        respx.get(f"{API}/missing").mock(return_value=httpx.Response(404))
        async with _transport() as transport:
            with pytest.raises(httpx.HTTPStatusError):
                await transport.fetch_document("/missing")

    @pytest.mark.asyncio
    @respx.mock
    async def test_absolute_uri_used_as_is(self):
        respx.get("http://elsewhere.test/doc").mock(return_value=httpx.Response(200, json={}))
        async with _transport() as transport:
            doc = await transport.fetch_document("http://elsewhere.test/doc")
        assert doc.entities == []


class TestGetRequest:
    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_configured_headers(self):
        route = respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        async with _transport() as transport:
            state = await _state(transport, Accept="application/json, text/html")
            resp = await transport.get_request(state)
        assert resp.status_code == 200
        assert route.calls[0].request.headers["Accept"] == "application/json, text/html"

    @pytest.mark.asyncio
    @respx.mock
    async def test_500_raises(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(500))
        async with _transport() as transport:
            state = await _state(transport)
            with pytest.raises(httpx.HTTPStatusError):
                await transport.get_request(state)


class TestPerformAction:
    @pytest.mark.asyncio
    @respx.mock
    async def test_json_action(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        route = respx.post(f"{API}/widgets").mock(return_value=httpx.Response(201, json={}))
        async with _transport() as transport:
            state = await _state(transport)
            resp = await transport.perform_action(state, "create", {"name": "gear"})
        assert resp.status_code == 201
        request = route.calls[0].request
        assert request.headers["Content-Type"] == "application/json"
        assert _json.loads(request.content) == {"name": "gear"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_action_uses_query(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        route = respx.get(f"{API}/widgets/search").mock(return_value=httpx.Response(200, json={}))
        async with _transport() as transport:
            state = await _state(transport)
            await transport.perform_action(state, "search", {"q": "gear"})
        assert route.calls[0].request.url.params["q"] == "gear"

    @pytest.mark.asyncio
    @respx.mock
    async def test_form_action(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        route = respx.put(f"{API}/widgets").mock(return_value=httpx.Response(204))
        async with _transport() as transport:
            state = await _state(transport)
            await transport.perform_action(state, "rename", {"name": "cog"})
        request = route.calls[0].request
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.content == b"name=cog"

    @pytest.mark.asyncio
    @respx.mock
    async def test_hypermedia_body(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        route = respx.put(f"{API}/widgets").mock(return_value=httpx.Response(200, json={}))
        body = Entity.model_validate({"class": ["widget"], "properties": {"name": "cog"}})
        async with _transport() as transport:
            state = await _state(transport)
            await transport.perform_action(state, "replace", body)
        request = route.calls[0].request
        assert request.headers["Content-Type"] == SIREN_MEDIA_TYPE
        sent = _json.loads(request.content)
        assert sent["class"] == ["widget"]
        assert sent["properties"] == {"name": "cog"}

    @pytest.mark.asyncio
    @respx.mock
    async def test_unknown_action(self):
        respx.get(f"{API}/widgets").mock(return_value=httpx.Response(200, json=_WIDGETS))
        async with _transport() as transport:
            state = await _state(transport)
            with pytest.raises(ActionNotFoundError) as info:
                await transport.perform_action(state, "delete", None)
        assert info.value.name == "delete"
        assert "create" in info.value.available


class TestClientOwnership:
    @pytest.mark.asyncio
    async def test_borrowed_client_stays_open(self):
        client = httpx.AsyncClient()
        transport = HttpTransport(client)
        await transport.aclose()
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        transport = _transport()
        await transport.aclose()
        assert transport._client.is_closed

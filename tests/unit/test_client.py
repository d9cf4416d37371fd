"""
Tests for the search backend client.
"""

from urllib.parse import parse_qs

import pytest
from aiohttp import web
from aiohttp import test_utils
from conftest import raw_result

from hits_search.backend.client import (
    BackendAPIError,
    SearchClient,
    SearchClientConfig,
    encode_params,
)
from hits_search.utils.errors import TransportError


def test_default_base_url():
    config = SearchClientConfig(application_id="APP", api_key="key")
    assert config.base_url == "https://APP-dsn.algolia.net"

    config = SearchClientConfig(application_id="APP", api_key="key", api_url="http://localhost:8080/")
    assert config.base_url == "http://localhost:8080"


def test_encode_params():
    """Strings are sent as is, everything else JSON encoded."""
    encoded = parse_qs(
        encode_params({"query": "red shirt", "hitsPerPage": 0, "facets": ["color"], "analytics": False})
    )
    assert encoded == {
        "query": ["red shirt"],
        "hitsPerPage": ["0"],
        "facets": ['["color"]'],
        "analytics": ["false"],
    }


class Backend:
    """In-process stand-in for the search backend."""

    def __init__(self):
        self.requests = []
        self.status = 200
        self.drop_results = False

    def app(self) -> web.Application:
        app = web.Application()
        app.router.add_post("/1/indexes/*/queries", self.queries)
        app.router.add_post("/1/indexes/{index}/query", self.query)
        return app

    async def query(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append((request.match_info["index"], dict(request.headers), body))
        if self.status != 200:
            return web.json_response({"message": "Service Unavailable", "status": self.status}, status=self.status)
        params = parse_qs(body["params"])
        return web.json_response(raw_result(nb_hits=int(params.get("hitsPerPage", ["3"])[0])))

    async def queries(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(("*", dict(request.headers), body))
        if self.status != 200:
            return web.json_response({"message": "Invalid filters", "status": self.status}, status=self.status)
        results = [
            raw_result(nb_hits=position, facets={"position": {str(position): 1}})
            for position, _ in enumerate(body["requests"])
        ]
        if self.drop_results:
            results = results[:-1]
        return web.json_response({"results": results})


@pytest.fixture
def backend():
    return Backend()


def _client_for(server: test_utils.TestServer) -> SearchClient:
    return SearchClient(
        SearchClientConfig(
            application_id="TESTAPP",
            api_key="test_api_key",
            api_url=str(server.make_url("")),
            timeout=5,
        )
    )


@pytest.mark.asyncio
async def test_search(backend):
    """Test a single query."""
    async with test_utils.TestServer(backend.app()) as server:
        client = _client_for(server)
        result = await client.search("products", {"query": "shirt", "hitsPerPage": 7})

    assert result["nbHits"] == 7
    index_name, headers, body = backend.requests[0]
    assert index_name == "products"
    assert headers["X-Algolia-Application-Id"] == "TESTAPP"
    assert headers["X-Algolia-API-Key"] == "test_api_key"
    assert parse_qs(body["params"]) == {"query": ["shirt"], "hitsPerPage": ["7"]}


@pytest.mark.asyncio
async def test_multiple_queries_keep_order(backend):
    """Test that a batch is one request and results come back in order."""
    requests = [
        {"indexName": "products", "params": {"query": "shirt"}},
        {"indexName": "products", "params": {"facets": ["color"], "hitsPerPage": 0}},
        {"indexName": "products", "params": {"facets": ["brand"], "hitsPerPage": 0}},
    ]
    async with test_utils.TestServer(backend.app()) as server:
        client = _client_for(server)
        results = await client.multiple_queries(requests)

    assert [result["nbHits"] for result in results] == [0, 1, 2]
    assert len(backend.requests) == 1
    _, _, body = backend.requests[0]
    assert body["strategy"] == "none"
    assert [entry["indexName"] for entry in body["requests"]] == ["products"] * 3
    assert parse_qs(body["requests"][1]["params"])["facets"] == ['["color"]']


@pytest.mark.asyncio
async def test_backend_error(backend):
    """Test that error responses carry the backend's message and status."""
    backend.status = 503
    async with test_utils.TestServer(backend.app()) as server:
        client = _client_for(server)
        with pytest.raises(BackendAPIError) as exc_info:
            await client.search("products", {})

    assert exc_info.value.status_code == 503
    assert exc_info.value.message == "Service Unavailable"
    assert exc_info.value.payload["status"] == 503


@pytest.mark.asyncio
async def test_batch_backend_error(backend):
    backend.status = 400
    async with test_utils.TestServer(backend.app()) as server:
        client = _client_for(server)
        with pytest.raises(BackendAPIError) as exc_info:
            await client.multiple_queries([{"indexName": "products", "params": {}}])

    assert exc_info.value.status_code == 400
    assert exc_info.value.message == "Invalid filters"


@pytest.mark.asyncio
async def test_batch_result_count_mismatch(backend):
    """Test that a batch answer with missing results is rejected."""
    backend.drop_results = True
    async with test_utils.TestServer(backend.app()) as server:
        client = _client_for(server)
        with pytest.raises(TransportError):
            await client.multiple_queries(
                [
                    {"indexName": "products", "params": {}},
                    {"indexName": "products", "params": {"hitsPerPage": 0}},
                ]
            )


@pytest.mark.asyncio
async def test_unreachable_backend():
    """Test that connection failures surface as transport errors."""
    client = SearchClient(
        SearchClientConfig(
            application_id="TESTAPP",
            api_key="test_api_key",
            api_url="http://127.0.0.1:9",
            timeout=2,
        )
    )
    with pytest.raises(TransportError):
        await client.search("products", {})

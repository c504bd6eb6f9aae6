"""Tests for the registry HTTP query client."""

import asyncio
import json
from unittest.mock import AsyncMock, patch

import aiohttp
import pytest
from aiohttp import test_utils, web

from registry import NpmCliClient, NpmRegistryClient, build_client
from registry.base import QueryFailure
from registry.npm.http_client import PACKUMENT_ACCEPT, _extract_latest_version, encode_package_name


def _query(client, name):
    return asyncio.run(client.query_latest_version(name))


class TestUrlBuilding:
    """Registry URLs."""

    def test_plain_name(self):
        client = NpmRegistryClient("https://registry.npmjs.org")
        assert client.package_url("left-pad") == "https://registry.npmjs.org/left-pad"

    def test_scoped_name_encodes_separator(self):
        client = NpmRegistryClient("https://registry.npmjs.org/")
        assert client.package_url("@types/node") == "https://registry.npmjs.org/@types%2Fnode"

    def test_encode_package_name(self):
        assert encode_package_name("@babel/core") == "@babel%2Fcore"
        assert encode_package_name("lodash") == "lodash"


class TestExtractLatestVersion:
    """dist-tags parsing."""

    def test_latest_present(self):
        assert _extract_latest_version({"dist-tags": {"latest": "1.3.0", "next": "2.0.0-rc.1"}}) == "1.3.0"

    def test_missing_dist_tags(self):
        assert _extract_latest_version({}) == ""

    def test_malformed_dist_tags(self):
        assert _extract_latest_version({"dist-tags": ["1.0.0"]}) == ""
        assert _extract_latest_version({"dist-tags": {"latest": 3}}) == ""


class TestQueryLatestVersion:
    """Response handling."""

    def test_success(self):
        client = NpmRegistryClient()
        body = json.dumps({"name": "left-pad", "dist-tags": {"latest": "1.3.0"}, "versions": {}})
        with patch.object(client, "_fetch", AsyncMock(return_value=(200, body))) as mock_fetch:
            assert _query(client, "left-pad") == "1.3.0"
        mock_fetch.assert_awaited_once_with("https://registry.npmjs.org/left-pad")

    def test_not_found(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(return_value=(404, '{"error":"Not found"}'))):
            with pytest.raises(QueryFailure, match="not found in registry"):
                _query(client, "no-such-pkg")

    def test_server_error(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(return_value=(503, "unavailable"))):
            with pytest.raises(QueryFailure, match="503"):
                _query(client, "left-pad")

    def test_bad_json(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(return_value=(200, "<html>"))):
            with pytest.raises(QueryFailure, match="couldn't decode JSON"):
                _query(client, "left-pad")

    def test_non_object_document(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(return_value=(200, "[]"))):
            with pytest.raises(QueryFailure, match="unexpected document shape"):
                _query(client, "left-pad")

    def test_no_latest_tag(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(return_value=(200, '{"dist-tags": {}}'))):
            with pytest.raises(QueryFailure, match="no latest dist-tag"):
                _query(client, "left-pad")

    def test_connection_error(self):
        client = NpmRegistryClient()
        error = aiohttp.ClientConnectionError("connection refused")
        with patch.object(client, "_fetch", AsyncMock(side_effect=error)):
            with pytest.raises(QueryFailure, match="connection error"):
                _query(client, "left-pad")

    def test_timeout(self):
        client = NpmRegistryClient()
        with patch.object(client, "_fetch", AsyncMock(side_effect=asyncio.TimeoutError())):
            with pytest.raises(QueryFailure, match="timed out"):
                _query(client, "left-pad")

    def test_close_without_session(self):
        asyncio.run(NpmRegistryClient().close())


class TestLocalRegistry:
    """Real aiohttp requests against an in-process registry."""

    @staticmethod
    def _app(seen_accept):
        async def packument(request):
            seen_accept.append(request.headers.get("Accept"))
            name = request.match_info["name"]
            if name == "left-pad":
                return web.json_response({"name": name, "dist-tags": {"latest": "1.3.0"}})
            if name == "broken":
                return web.Response(status=500, text="internal error")
            return web.json_response({"error": "Not found"}, status=404)

        app = web.Application()
        app.router.add_get("/{name}", packument)
        return app

    def _lookup(self, name, seen_accept=None):
        seen_accept = [] if seen_accept is None else seen_accept

        async def run():
            async with test_utils.TestServer(self._app(seen_accept)) as server:
                async with NpmRegistryClient(str(server.make_url("/"))) as client:
                    return await client.query_latest_version(name)

        return asyncio.run(run())

    def test_sends_abbreviated_metadata_accept_header(self):
        seen_accept = []

        assert self._lookup("left-pad", seen_accept) == "1.3.0"
        assert seen_accept == [PACKUMENT_ACCEPT]

    def test_not_found_response(self):
        with pytest.raises(QueryFailure, match="not found in registry"):
            self._lookup("no-such-pkg")

    def test_server_error_response(self):
        with pytest.raises(QueryFailure, match="500"):
            self._lookup("broken")

    def test_session_lives_for_the_context(self):
        inside = {}

        async def run():
            async with test_utils.TestServer(self._app([])) as server:
                client = NpmRegistryClient(str(server.make_url("/")))
                async with client:
                    inside["open"] = client._session is not None and not client._session.closed
                    await client.query_latest_version("left-pad")
                return client

        client = asyncio.run(run())

        assert inside["open"] is True
        assert client._session is None


class TestBuildClient:
    """Backend selection."""

    def test_npm_backend(self):
        client = build_client("npm", registry="https://npm.example.com/", timeout=5)
        assert isinstance(client, NpmCliClient)
        assert client.build_command("a")[-2:] == ["--registry", "https://npm.example.com/"]

    def test_http_backend(self):
        client = build_client("http", registry="https://npm.example.com")
        assert isinstance(client, NpmRegistryClient)
        assert client.package_url("a") == "https://npm.example.com/a"

    def test_http_backend_default_registry(self):
        assert build_client("http").package_url("a") == "https://registry.npmjs.org/a"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            build_client("yarn")

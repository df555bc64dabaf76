"""Tests for the HTTP fetcher using mocked HTTP responses."""

import httpx
import pytest
import respx

from livery import FetchError, Schema, create_http_fetcher, create_resolver

URL = "https://themes.test.dev/v1/themes/{theme_id}"


class TestCreateHttpFetcher:
    """Tests for create_http_fetcher()."""

    def test_requires_placeholder(self) -> None:
        with pytest.raises(ValueError, match="theme_id"):
            create_http_fetcher("https://themes.test.dev/v1/themes")

    @respx.mock
    @pytest.mark.asyncio
    async def test_fetches_json_payload(self) -> None:
        route = respx.get("https://themes.test.dev/v1/themes/dark").mock(
            return_value=httpx.Response(200, json={"brand": {"primary": "#000"}})
        )
        fetch = create_http_fetcher(URL, headers={"Authorization": "Bearer k"})

        payload = await fetch("dark")

        assert payload == {"brand": {"primary": "#000"}}
        request = route.calls[0].request
        assert request.headers["accept"] == "application/json"
        assert request.headers["authorization"] == "Bearer k"

    @respx.mock
    @pytest.mark.asyncio
    async def test_theme_id_is_quoted(self) -> None:
        route = respx.get("https://themes.test.dev/v1/themes/a%2Fb").mock(
            return_value=httpx.Response(200, json={})
        )
        fetch = create_http_fetcher(URL)

        assert await fetch("a/b") == {}
        assert route.called

    @respx.mock
    @pytest.mark.asyncio
    async def test_uses_given_client(self) -> None:
        respx.get("https://themes.test.dev/v1/themes/light").mock(
            return_value=httpx.Response(200, json={"spacing": {"sm": "2px"}})
        )
        async with httpx.AsyncClient() as client:
            fetch = create_http_fetcher(URL, client=client)
            assert await fetch("light") == {"spacing": {"sm": "2px"}}

    @respx.mock
    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        respx.get("https://themes.test.dev/v1/themes/missing").mock(
            return_value=httpx.Response(404, json={"error": "not found"})
        )
        fetch = create_http_fetcher(URL)

        with pytest.raises(httpx.HTTPStatusError):
            await fetch("missing")

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_object_body_raises(self) -> None:
        respx.get("https://themes.test.dev/v1/themes/list").mock(
            return_value=httpx.Response(200, json=["not", "a", "theme"])
        )
        fetch = create_http_fetcher(URL)

        with pytest.raises(TypeError, match="Expected a JSON object"):
            await fetch("list")


class TestHttpFetcherWithResolver:
    """The HTTP fetcher plugged into a resolver."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_resolves_over_http(self, schema: Schema) -> None:
        route = respx.get("https://themes.test.dev/v1/themes/acme").mock(
            return_value=httpx.Response(200, json={"brand": {"primary": "#ff0000"}})
        )
        resolver = create_resolver(schema=schema, fetcher=create_http_fetcher(URL))

        theme = await resolver.resolve("acme")
        await resolver.resolve("acme")

        assert theme["brand"]["primary"] == "#ff0000"
        assert route.call_count == 1

    @respx.mock
    @pytest.mark.asyncio
    async def test_transport_failure_becomes_fetch_error(
        self, schema: Schema
    ) -> None:
        respx.get("https://themes.test.dev/v1/themes/acme").mock(
            side_effect=httpx.ConnectError("refused")
        )
        resolver = create_resolver(schema=schema, fetcher=create_http_fetcher(URL))

        with pytest.raises(FetchError) as exc_info:
            await resolver.resolve("acme")
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

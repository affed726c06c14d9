"""Tests for the weather tool."""

import httpx
import pytest

from sumit.tools.weather import WeatherTool


def make_transport(status_code: int = 200, text: str = "Partly cloudy +21°C\n", requests: list | None = None):
    """httpx.MockTransport answering every request with the same body."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, text=text)

    return httpx.MockTransport(handler)


class TestWeatherToolProperties:
    def test_name(self):
        assert WeatherTool().name == "weather-by-city"

    def test_description(self):
        assert "weather" in WeatherTool().description.lower()


class TestWeatherToolExecute:
    @pytest.mark.asyncio
    async def test_success(self):
        tool = WeatherTool(transport=make_transport())
        result = await tool.invoke("Paris")

        assert result.success is True
        assert result.text == "The weather in Paris is currently: Partly cloudy +21°C"

    @pytest.mark.asyncio
    async def test_request_url(self):
        requests: list[httpx.Request] = []
        tool = WeatherTool(transport=make_transport(requests=requests))
        await tool.invoke("New York")

        assert len(requests) == 1
        url = requests[0].url
        assert url.host == "wttr.in"
        assert url.path == "/new york"
        assert url.params["format"] == "%C %t"

    @pytest.mark.asyncio
    async def test_http_error(self):
        tool = WeatherTool(transport=make_transport(status_code=503, text="busy"))
        result = await tool.invoke("Paris")

        assert result.success is False
        assert result.text == "Weather lookup for Paris failed: HTTP 503"

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        tool = WeatherTool(transport=httpx.MockTransport(handler))
        result = await tool.invoke("Paris")

        assert result.success is False
        assert "Weather lookup for Paris failed" in result.text
        assert "refused" in result.text

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        tool = WeatherTool(timeout=2.0, transport=httpx.MockTransport(handler))
        result = await tool.invoke("Paris")

        assert result.success is False
        assert "timed out after 2.0s" in result.text

    @pytest.mark.asyncio
    async def test_empty_body(self):
        tool = WeatherTool(transport=make_transport(text="  \n"))
        result = await tool.invoke("Paris")

        assert result.success is False
        assert "No weather data" in result.text

    @pytest.mark.asyncio
    async def test_empty_city(self):
        tool = WeatherTool(transport=make_transport())
        result = await tool.invoke("  ")

        assert result.success is False
        assert "city name is required" in result.text

    @pytest.mark.asyncio
    async def test_calls_are_independent(self):
        tool = WeatherTool(transport=make_transport())
        first = await tool.invoke("Paris")
        second = await tool.invoke("Paris")

        assert first == second

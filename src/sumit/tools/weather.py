"""Weather lookup tool backed by wttr.in."""

from urllib.parse import quote

import httpx

from ..errors import ToolExecutionError
from .base import Tool, ToolResult

WTTR_BASE_URL = "https://wttr.in"

# Condition and temperature, e.g. "Partly cloudy +21°C"
WTTR_FORMAT = "%C %t"


class WeatherTool(Tool):
    """Tool returning current weather conditions for a city."""

    def __init__(
        self,
        base_url: str = WTTR_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return "weather-by-city"

    @property
    def input_name(self) -> str:
        return "city"

    @property
    def description(self) -> str:
        return "Returns the current weather details (conditions and temperature) of the given city name."

    async def _fetch(self, city: str) -> str:
        url = f"{self._base_url}/{quote(city.lower())}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = await client.get(url, params={"format": WTTR_FORMAT})
                response.raise_for_status()
                return response.text.strip()
        except httpx.TimeoutException as e:
            raise ToolExecutionError(
                f"Weather lookup for {city} timed out after {self._timeout}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise ToolExecutionError(
                f"Weather lookup for {city} failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise ToolExecutionError(f"Weather lookup for {city} failed: {e}") from e

    async def execute(self, value: str) -> ToolResult:
        city = value.strip()
        if not city:
            raise ToolExecutionError("A city name is required")

        conditions = await self._fetch(city)
        if not conditions:
            raise ToolExecutionError(f"No weather data returned for {city}")

        return ToolResult(
            success=True,
            output=f"The weather in {city} is currently: {conditions}",
        )

# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Weather server returning mock data."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
import json
from typing import Any, Literal

from pydantic import BaseModel, Field

from ..config import ServerConfig
from ..server import BaseMCPServer


ALERTS_URI = "weather://alerts/current"
FORECAST_DESCRIPTIONS = ("Sunny", "Partly cloudy", "Cloudy")


class WeatherInput(BaseModel):
    location: str = Field(min_length=1, max_length=100)
    units: Literal["celsius", "fahrenheit"] = "celsius"


class WeatherOutput(BaseModel):
    temperature: float
    description: str
    humidity: float
    windSpeed: float


class ForecastInput(BaseModel):
    location: str = Field(min_length=1, max_length=100)
    days: int = Field(default=3, ge=1, le=7)


class DailyForecast(BaseModel):
    date: str
    high: float
    low: float
    description: str


class ForecastOutput(BaseModel):
    forecasts: list[DailyForecast]


class WeatherServer(BaseMCPServer):
    """Current conditions, a short forecast and active alerts.

    ``api_key`` is kept for a real provider; the mock never uses it.
    """

    def __init__(
        self,
        config: ServerConfig | Mapping[str, Any] | None = None,
        *,
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.api_key = api_key
        super().__init__(config, **kwargs)

    def register_components(self) -> None:
        self.register_tool(
            "get_weather",
            {
                "description": "Get current weather for a location",
                "input_schema": WeatherInput,
                "output_schema": WeatherOutput,
            },
            self.get_weather,
        )
        self.register_tool(
            "get_forecast",
            {
                "description": "Get weather forecast for the next few days",
                "input_schema": ForecastInput,
                "output_schema": ForecastOutput,
            },
            self.get_forecast,
        )
        self.register_resource(
            "weather_alerts.json",
            ALERTS_URI,
            {
                "description": "Current weather alerts and warnings",
                "metadata": {"updateFrequency": "15 minutes", "source": "National Weather Service"},
                "mime_type": "application/json",
            },
            self.get_weather_alerts,
        )

    async def get_weather(self, params: WeatherInput) -> tuple[str, WeatherOutput]:
        celsius = params.units == "celsius"
        temperature = 22 if celsius else 72
        text = f"Current weather in {params.location}: {temperature}° {'C' if celsius else 'F'}, Partly cloudy"
        return text, WeatherOutput(temperature=temperature, description="Partly cloudy", humidity=65, windSpeed=10)

    async def get_forecast(self, params: ForecastInput) -> tuple[str, ForecastOutput]:
        today = datetime.now(timezone.utc).date()
        forecasts = [
            DailyForecast(
                date=(today + timedelta(days=i + 1)).isoformat(),
                high=25 - i,
                low=15 - i,
                description=FORECAST_DESCRIPTIONS[i % len(FORECAST_DESCRIPTIONS)],
            )
            for i in range(params.days)
        ]
        lines = [f"{f.date}: {f.description}, High: {f.high:g}°C, Low: {f.low:g}°C" for f in forecasts]
        text = f"{params.days}-day forecast for {params.location}:\n" + "\n".join(lines)
        return text, ForecastOutput(forecasts=forecasts)

    async def get_weather_alerts(self) -> dict[str, Any]:
        valid_until = datetime.now(timezone.utc) + timedelta(hours=24)
        alerts = [
            {
                "type": "warning",
                "title": "Heavy Rain Warning",
                "description": "Heavy rainfall expected in the next 24 hours",
                "severity": "moderate",
                "validUntil": valid_until.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            }
        ]
        return {"contents": [{"text": json.dumps(alerts, indent=2), "mimeType": "application/json"}]}


__all__ = ["ALERTS_URI", "WeatherServer"]

"""
Current-weather lookup for the analysis location.

OpenWeatherMap is used when a key is configured; Open-Meteo needs no key
and stands in as the alternate source. Both reduce to a ``WeatherSnapshot``
in metric units (wind in m/s).
"""
from typing import Any, Dict, Optional

from ..schemas import GeoCoordinates, ImageInput, WeatherSnapshot
from .base import ProviderAdapter

OWM_URL = "https://api.openweathermap.org/data/2.5/weather"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"

# WMO weather interpretation codes, grouped
WMO_DESCRIPTIONS = {
    0: "clear sky",
    1: "mainly clear",
    2: "partly cloudy",
    3: "overcast",
    45: "fog",
    48: "depositing rime fog",
    51: "light drizzle",
    53: "drizzle",
    55: "dense drizzle",
    61: "light rain",
    63: "rain",
    65: "heavy rain",
    71: "light snow",
    73: "snow",
    75: "heavy snow",
    80: "rain showers",
    81: "rain showers",
    82: "violent rain showers",
    95: "thunderstorm",
    96: "thunderstorm with hail",
    99: "thunderstorm with hail",
}


def parse_openweather_response(raw: Dict[str, Any]) -> WeatherSnapshot:
    main = raw["main"]
    weather = raw.get("weather") or [{}]
    return WeatherSnapshot(
        temperature=float(main["temp"]),
        humidity=float(main["humidity"]),
        description=weather[0].get("description", ""),
        windSpeed=float((raw.get("wind") or {}).get("speed", 0.0)),
        source="openweathermap",
    )


def parse_open_meteo_response(raw: Dict[str, Any]) -> WeatherSnapshot:
    current = raw.get("current")
    if not current:
        raise ValueError("No current conditions in Open-Meteo payload")
    temp = current.get("temperature_2m")
    humidity = current.get("relative_humidity_2m")
    if temp is None or humidity is None:
        raise ValueError("Open-Meteo payload missing temperature or humidity")
    code = current.get("weather_code")
    return WeatherSnapshot(
        temperature=float(temp),
        humidity=float(humidity),
        description=WMO_DESCRIPTIONS.get(code, "") if code is not None else "",
        windSpeed=float(current.get("wind_speed_10m") or 0.0),
        source="open-meteo",
    )


class OpenWeatherMapAdapter(ProviderAdapter):
    name = "openWeatherMap"
    requires_geo = True

    def __init__(self, client, api_key: str):
        super().__init__(client)
        self.api_key = api_key

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        params = {
            "lat": geo.latitude,
            "lon": geo.longitude,
            "units": "metric",
            "appid": self.api_key,
        }
        resp = await self.client.get(OWM_URL, params=params)
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> WeatherSnapshot:
        return parse_openweather_response(raw)


class OpenMeteoAdapter(ProviderAdapter):
    name = "openMeteo"
    requires_geo = True

    async def fetch(self, image: ImageInput, geo: Optional[GeoCoordinates] = None) -> Dict[str, Any]:
        params = {
            "latitude": geo.latitude,
            "longitude": geo.longitude,
            "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,weather_code",
            "wind_speed_unit": "ms",
            "timezone": "auto",
        }
        resp = await self.client.get(OPEN_METEO_URL, params=params)
        resp.raise_for_status()
        return resp.json()

    def parse(self, raw: Dict[str, Any]) -> WeatherSnapshot:
        return parse_open_meteo_response(raw)

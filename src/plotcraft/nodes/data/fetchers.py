"""
Live data fetchers.

Each fetcher is a coroutine that downloads one JSON document with
aiohttp and reduces it to a flat dict of numbers. The reductions are
plain functions so they can be exercised without the network.
"""

from __future__ import annotations

from typing import Any

import aiohttp

from plotcraft.core.errors import DataFetchError

REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=30)

COINGECKO_URL = "https://api.coingecko.com/api/v3/coins/bitcoin/market_chart"
OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
USGS_FEED_URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/{threshold}_{period}.geojson"

BITCOIN_DEFAULTS: dict[str, Any] = {
    "high": 0, "low": 0, "open": 0, "close": 0,
    "current": 0, "volume": 0, "change": 0, "history": [],
}

WEATHER_DEFAULTS: dict[str, Any] = {
    "temperature": 0, "humidity": 0, "windSpeed": 0,
    "precipitation": 0, "cloudCover": 0, "uvIndex": 0,
}

EARTHQUAKE_DEFAULTS: dict[str, Any] = {
    "count": 0, "maxMagnitude": 0, "avgMagnitude": 0, "avgDepth": 0,
    "latestLat": 0, "latestLon": 0, "latestMag": 0,
}


async def fetch_json(url: str, params: dict[str, Any] | None = None, service: str = "API") -> Any:
    """GET a JSON document, raising DataFetchError on a non-2xx status."""
    async with aiohttp.ClientSession(timeout=REQUEST_TIMEOUT) as session:
        async with session.get(url, params=params) as resp:
            if resp.status >= 400:
                raise DataFetchError(f"{service} error: {resp.status}")
            return await resp.json(content_type=None)


# --- Bitcoin (CoinGecko) ---

def summarize_bitcoin(data: dict[str, Any]) -> dict[str, Any]:
    """Reduce a CoinGecko market chart to price statistics."""
    prices = [p[1] for p in data.get("prices") or []]
    volumes = data.get("total_volumes") or []
    if not prices:
        raise DataFetchError("No price data returned")

    first, last = prices[0], prices[-1]
    return {
        "high": max(prices),
        "low": min(prices),
        "open": first,
        "close": last,
        "current": last,
        "volume": volumes[-1][1] if volumes else 0,
        "change": ((last - first) / first) * 100 if first != 0 else 0,
        "history": prices,
    }


async def fetch_bitcoin(days: int) -> dict[str, Any]:
    data = await fetch_json(
        COINGECKO_URL, {"vs_currency": "usd", "days": str(days)}, service="CoinGecko API"
    )
    return summarize_bitcoin(data)


# --- Weather (Open-Meteo) ---

def summarize_weather(data: dict[str, Any]) -> dict[str, Any]:
    current = data.get("current")
    if not current:
        raise DataFetchError("No current weather data returned")
    return {
        "temperature": current.get("temperature_2m") or 0,
        "humidity": current.get("relative_humidity_2m") or 0,
        "windSpeed": current.get("wind_speed_10m") or 0,
        "precipitation": current.get("precipitation") or 0,
        "cloudCover": current.get("cloud_cover") or 0,
        "uvIndex": current.get("uv_index") or 0,
    }


async def fetch_weather(latitude: float, longitude: float) -> dict[str, Any]:
    params = {
        "latitude": str(latitude),
        "longitude": str(longitude),
        "current": "temperature_2m,relative_humidity_2m,wind_speed_10m,precipitation,cloud_cover,uv_index",
        "temperature_unit": "fahrenheit",
        "wind_speed_unit": "mph",
    }
    data = await fetch_json(OPEN_METEO_URL, params, service="Open-Meteo API")
    return summarize_weather(data)


# --- Earthquakes (USGS) ---

def magnitude_threshold(min_magnitude: float) -> str:
    """Closest USGS summary feed at or below a magnitude."""
    if min_magnitude >= 4.5:
        return "4.5"
    if min_magnitude >= 2.5:
        return "2.5"
    if min_magnitude >= 1.0:
        return "1.0"
    return "all"


def summarize_earthquakes(data: dict[str, Any], min_magnitude: float) -> dict[str, Any]:
    """Statistics over the features at or above ``min_magnitude``."""
    features = [
        f for f in data.get("features") or []
        if (f["properties"].get("mag") or 0) >= min_magnitude
    ]
    if not features:
        return dict(EARTHQUAKE_DEFAULTS)

    magnitudes = [f["properties"].get("mag") or 0 for f in features]
    depths = [f["geometry"]["coordinates"][2] or 0 for f in features]
    latest = max(features, key=lambda f: f["properties"].get("time") or 0)
    lon, lat = latest["geometry"]["coordinates"][:2]

    return {
        "count": len(features),
        "maxMagnitude": max(magnitudes),
        "avgMagnitude": round(sum(magnitudes) / len(magnitudes), 2),
        "avgDepth": round(sum(depths) / len(depths), 2),
        "latestLat": lat,
        "latestLon": lon,
        "latestMag": latest["properties"].get("mag") or 0,
    }


async def fetch_earthquakes(time_period: str, min_magnitude: float) -> dict[str, Any]:
    url = USGS_FEED_URL.format(threshold=magnitude_threshold(min_magnitude), period=time_period)
    data = await fetch_json(url, service="USGS API")
    return summarize_earthquakes(data, min_magnitude)

"""
Data Nodes - Live numbers from public web APIs.

- Bitcoin Data: CoinGecko price history
- Weather Data: Open-Meteo current conditions
- Earthquake Data: USGS earthquake feed statistics

The executors never block: they read whatever their DataSource holds
and let it refresh in the background. Pressing a node's Refresh button
increments its ``refresh`` counter, which forces a new fetch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from plotcraft.core.data_types import DataType
from plotcraft.core.node_types import (
    NodeCategory,
    NodeRegistry,
    NodeType,
    OutputDefinition,
    ParameterDefinition,
)
from plotcraft.nodes.data.fetchers import (
    BITCOIN_DEFAULTS,
    EARTHQUAKE_DEFAULTS,
    WEATHER_DEFAULTS,
    fetch_bitcoin,
    fetch_earthquakes,
    fetch_weather,
)
from plotcraft.nodes.data.source import DataSource, spawn_thread


@dataclass
class DataSources:
    """The live data caches shared by one graph host."""
    bitcoin: DataSource
    weather: DataSource
    earthquake: DataSource

    @classmethod
    def create(
        cls,
        on_update: Callable[[], None] | None = None,
        spawn: Callable[[Callable[[], None]], None] = spawn_thread,
    ) -> DataSources:
        return cls(
            bitcoin=DataSource("Bitcoin", fetch_bitcoin, BITCOIN_DEFAULTS, on_update=on_update, spawn=spawn),
            weather=DataSource("Weather", fetch_weather, WEATHER_DEFAULTS, on_update=on_update, spawn=spawn),
            earthquake=DataSource(
                "Earthquake", fetch_earthquakes, EARTHQUAKE_DEFAULTS, on_update=on_update, spawn=spawn
            ),
        )


def _number_outputs(names: list[tuple[str, str]]) -> list[OutputDefinition]:
    return [OutputDefinition(name, label, DataType.NUMBER) for name, label in names]


def _refresh_button() -> ParameterDefinition:
    return ParameterDefinition.button("refresh", "Refresh Data")


def create_data_nodes(sources: DataSources) -> list[NodeType]:
    """Build the data node types bound to a set of caches."""

    def bitcoin_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
        days = int(parameters.get("days", 7))
        data = sources.bitcoin.get(context.node_id, (days,), parameters.get("refresh", 0))
        selected = parameters.get("dataPoint", "high")
        return {
            "value": data.get(selected, 0),
            "high": data["high"],
            "low": data["low"],
            "current": data["current"],
            "volume": data["volume"],
            "change": data["change"],
            "history": list(data["history"]),
        }

    def weather_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
        args = (parameters.get("latitude", 40.7128), parameters.get("longitude", -74.006))
        return dict(sources.weather.get(context.node_id, args, parameters.get("refresh", 0)))

    def earthquake_executor(inputs: dict[str, Any], parameters: dict[str, Any], context: Any) -> dict[str, Any]:
        args = (parameters.get("timePeriod", "day"), parameters.get("minMagnitude", 2.5))
        return dict(sources.earthquake.get(context.node_id, args, parameters.get("refresh", 0)))

    bitcoin = NodeType(
        id="bitcoinData",
        name="Bitcoin Data",
        description="Fetches historical Bitcoin price data from CoinGecko",
        category=NodeCategory.DATA,
        outputs=_number_outputs([
            ("value", "Value"), ("high", "High"), ("low", "Low"), ("current", "Current"),
            ("volume", "Volume"), ("change", "Change %"),
        ]) + [OutputDefinition("history", "History", DataType.NUMBER_ARRAY)],
        parameters=[
            ParameterDefinition.number("days", "Days", default=7, min_value=1, max_value=90, step=1),
            ParameterDefinition.select(
                "dataPoint",
                "Data Point",
                options=[
                    ("high", "High"), ("low", "Low"), ("open", "Open"),
                    ("close", "Close"), ("volume", "Volume"),
                ],
            ),
            _refresh_button(),
        ],
        executor=bitcoin_executor,
    )

    weather = NodeType(
        id="weatherData",
        name="Weather Data",
        description="Fetches current weather data from Open-Meteo",
        category=NodeCategory.DATA,
        outputs=_number_outputs([
            ("temperature", "Temperature"), ("humidity", "Humidity"), ("windSpeed", "Wind Speed"),
            ("precipitation", "Precipitation"), ("cloudCover", "Cloud Cover"), ("uvIndex", "UV Index"),
        ]),
        parameters=[
            ParameterDefinition.number("latitude", "Latitude", default=40.7128, min_value=-90, max_value=90, step=0.0001),
            ParameterDefinition.number("longitude", "Longitude", default=-74.006, min_value=-180, max_value=180, step=0.0001),
            _refresh_button(),
        ],
        executor=weather_executor,
    )

    earthquake = NodeType(
        id="earthquakeData",
        name="Earthquake Data",
        description="Fetches recent earthquake statistics from the USGS feed",
        category=NodeCategory.DATA,
        outputs=_number_outputs([
            ("count", "Count"), ("maxMagnitude", "Max Magnitude"), ("avgMagnitude", "Avg Magnitude"),
            ("avgDepth", "Avg Depth"), ("latestLat", "Latest Lat"), ("latestLon", "Latest Lon"),
            ("latestMag", "Latest Mag"),
        ]),
        parameters=[
            ParameterDefinition.select(
                "timePeriod",
                "Time Period",
                options=[
                    ("hour", "Past Hour"), ("day", "Past Day"),
                    ("week", "Past Week"), ("month", "Past Month"),
                ],
                default="day",
            ),
            ParameterDefinition.number(
                "minMagnitude", "Min Magnitude", default=2.5, min_value=0, max_value=10, step=0.5
            ),
            _refresh_button(),
        ],
        executor=earthquake_executor,
    )

    return [bitcoin, weather, earthquake]


def register_data_nodes(registry: NodeRegistry, sources: DataSources | None = None) -> DataSources:
    """
    Register the data nodes.

    Returns:
        The caches the nodes read from, created if not given
    """
    if sources is None:
        sources = DataSources.create()
    for node_type in create_data_nodes(sources):
        registry.register(node_type)
    return sources

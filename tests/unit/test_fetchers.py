"""
Tests for the live data reductions (no network access).
"""

import pytest

from plotcraft.core.errors import DataFetchError
from plotcraft.nodes.data.fetchers import (
    EARTHQUAKE_DEFAULTS,
    USGS_FEED_URL,
    magnitude_threshold,
    summarize_bitcoin,
    summarize_earthquakes,
    summarize_weather,
)


def quake(mag, time, lon=10.0, lat=20.0, depth=5.0):
    return {
        "properties": {"mag": mag, "time": time},
        "geometry": {"coordinates": [lon, lat, depth]},
    }


class TestBitcoin:
    def test_summary(self):
        data = {
            "prices": [[0, 100.0], [1, 150.0], [2, 90.0], [3, 120.0]],
            "total_volumes": [[0, 5.0], [3, 7.0]],
        }
        summary = summarize_bitcoin(data)
        assert summary["high"] == 150
        assert summary["low"] == 90
        assert summary["open"] == 100
        assert summary["close"] == summary["current"] == 120
        assert summary["volume"] == 7
        assert summary["change"] == pytest.approx(20)
        assert summary["history"] == [100, 150, 90, 120]

    def test_zero_open_has_no_change(self):
        summary = summarize_bitcoin({"prices": [[0, 0.0], [1, 5.0]]})
        assert summary["change"] == 0
        assert summary["volume"] == 0

    def test_no_prices(self):
        with pytest.raises(DataFetchError):
            summarize_bitcoin({"prices": []})


class TestWeather:
    def test_summary(self):
        data = {
            "current": {
                "temperature_2m": 68.5,
                "relative_humidity_2m": 40,
                "wind_speed_10m": 3.2,
                "precipitation": 0,
                "cloud_cover": 75,
            }
        }
        summary = summarize_weather(data)
        assert summary["temperature"] == 68.5
        assert summary["cloudCover"] == 75
        assert summary["uvIndex"] == 0

    def test_missing_current(self):
        with pytest.raises(DataFetchError):
            summarize_weather({})


class TestEarthquakes:
    @pytest.mark.parametrize(
        "magnitude, feed",
        [(0, "all"), (1.0, "1.0"), (2.4, "1.0"), (2.5, "2.5"), (4.4, "2.5"), (6, "4.5")],
    )
    def test_magnitude_threshold(self, magnitude, feed):
        assert magnitude_threshold(magnitude) == feed

    def test_feed_url(self):
        url = USGS_FEED_URL.format(threshold=magnitude_threshold(3), period="week")
        assert url.endswith("/2.5_week.geojson")

    def test_summary(self):
        data = {
            "features": [
                quake(3.0, 100, depth=10),
                quake(5.0, 300, lon=-120.5, lat=35.25, depth=20),
                quake(1.0, 500),
            ]
        }
        summary = summarize_earthquakes(data, 2.5)
        assert summary["count"] == 2
        assert summary["maxMagnitude"] == 5.0
        assert summary["avgMagnitude"] == 4.0
        assert summary["avgDepth"] == 15.0
        # Latest by time among the kept features
        assert (summary["latestLat"], summary["latestLon"]) == (35.25, -120.5)
        assert summary["latestMag"] == 5.0

    def test_no_matching_features(self):
        data = {"features": [quake(1.0, 1)]}
        assert summarize_earthquakes(data, 2.5) == EARTHQUAKE_DEFAULTS
        assert summarize_earthquakes({}, 0) == EARTHQUAKE_DEFAULTS

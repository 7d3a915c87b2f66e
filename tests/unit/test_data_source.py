"""
Tests for the background-fetching data cache and the data nodes.
"""

import pytest

from plotcraft.core.errors import DataFetchError
from plotcraft.core.execution import ExecutionContext
from plotcraft.engine.rng import create_rng
from plotcraft.nodes.data import DataSource, DataSources, create_data_nodes
from plotcraft.nodes.data.fetchers import BITCOIN_DEFAULTS, EARTHQUAKE_DEFAULTS, WEATHER_DEFAULTS

DEFAULTS = {"value": 0}


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class Harness:
    """A DataSource whose fetches run only when the test says so."""

    def __init__(self, fetcher=None, ttl=60):
        self.calls = []
        self.updates = 0
        self.queued = []
        self.clock = FakeClock()

        async def default_fetcher(*args):
            self.calls.append(args)
            return {"value": sum(args)}

        self.source = DataSource(
            "Test",
            fetcher or default_fetcher,
            DEFAULTS,
            ttl=ttl,
            on_update=self.on_update,
            clock=self.clock,
            spawn=self.queued.append,
        )

    def on_update(self):
        self.updates += 1

    def run_fetches(self):
        queued = list(self.queued)
        self.queued.clear()
        for fetch in queued:
            fetch()


class TestDataSource:
    def test_defaults_before_first_fetch(self):
        h = Harness()
        assert h.source.get("n1", (1, 2)) == {"value": 0}
        assert len(h.queued) == 1
        assert h.source.is_loading("n1")

    def test_single_fetch_while_pending(self):
        h = Harness()
        h.source.get("n1", (1,))
        h.source.get("n1", (1,))
        assert len(h.queued) == 1

    def test_cached_after_fetch(self):
        h = Harness()
        h.source.get("n1", (1, 2))
        h.run_fetches()
        assert h.source.get("n1", (1, 2)) == {"value": 3}
        assert h.updates == 1
        assert not h.source.is_loading("n1")
        assert h.queued == []

    def test_nodes_cached_separately(self):
        h = Harness()
        h.source.get("n1", (1,))
        h.run_fetches()
        assert h.source.get("n2", (5,)) == {"value": 0}
        assert len(h.queued) == 1

    def test_stale_entry_served_while_refetching(self):
        h = Harness(ttl=60)
        h.source.get("n1", (1,))
        h.run_fetches()
        h.clock.now += 61
        assert h.source.get("n1", (1,)) == {"value": 1}
        assert len(h.queued) == 1

    def test_fresh_within_ttl(self):
        h = Harness(ttl=60)
        h.source.get("n1", (1,))
        h.run_fetches()
        h.clock.now += 60
        h.source.get("n1", (1,))
        assert h.queued == []

    def test_argument_change_refetches(self):
        h = Harness()
        h.source.get("n1", (1,))
        h.run_fetches()
        assert h.source.get("n1", (4,)) == {"value": 1}
        h.run_fetches()
        assert h.source.get("n1", (4,)) == {"value": 4}
        assert h.calls == [(1,), (4,)]

    def test_refresh_key_forces_fetch(self):
        h = Harness()
        h.source.get("n1", (1,), refresh_key=0)
        h.run_fetches()
        h.source.get("n1", (1,), refresh_key=1)
        assert len(h.queued) == 1

    def test_failure_caches_defaults(self):
        async def failing(*args):
            raise DataFetchError("offline")

        h = Harness(fetcher=failing)
        h.source.get("n1", (1,))
        h.run_fetches()
        assert h.updates == 0
        assert not h.source.is_loading("n1")
        # Retry waits for the TTL
        assert h.source.get("n1", (1,)) == {"value": 0}
        assert h.queued == []

    def test_failure_keeps_previous_data(self):
        outcomes = [{"value": 7}, DataFetchError("offline")]

        async def flaky(*args):
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        h = Harness(fetcher=flaky)
        h.source.get("n1", (1,))
        h.run_fetches()
        h.source.get("n1", (1,), refresh_key=1)
        h.run_fetches()
        assert h.source.get("n1", (1,), refresh_key=0) == {"value": 7}

    def test_failed_refresh_of_stale_entry_waits_for_ttl(self):
        outcomes = [{"value": 7}]

        async def flaky(*args):
            if not outcomes:
                raise DataFetchError("offline")
            return outcomes.pop(0)

        h = Harness(fetcher=flaky, ttl=60)
        h.source.get("n1", (1,))
        h.run_fetches()
        h.clock.now += 61
        h.source.get("n1", (1,))
        h.run_fetches()

        spawned = 0
        for _ in range(5):
            assert h.source.get("n1", (1,)) == {"value": 7}
            spawned += len(h.queued)
            h.run_fetches()
        assert spawned == 0

        h.clock.now += 61
        h.source.get("n1", (1,))
        assert len(h.queued) == 1

    def test_defaults_are_copied(self):
        h = Harness()
        h.source.get("n1", (1,))["value"] = 99
        assert DEFAULTS == {"value": 0}

    def test_clear(self):
        h = Harness()
        h.source.get("n1", (1,))
        h.run_fetches()
        h.source.clear()
        assert h.source.get("n1", (1,)) == {"value": 0}


class TestDataNodes:
    def nodes(self):
        queued = []
        sources = DataSources.create(spawn=queued.append)
        return {node_type.id: node_type for node_type in create_data_nodes(sources)}, queued

    def execute(self, node_type, **params):
        context = ExecutionContext(canvas=None, seed=1, rng=create_rng(1), node_id="data-1")
        return node_type.executor({}, node_type.resolve_parameters(params), context)

    def test_registered_ids(self):
        nodes, _ = self.nodes()
        assert set(nodes) == {"bitcoinData", "weatherData", "earthquakeData"}

    def test_bitcoin_defaults(self):
        nodes, queued = self.nodes()
        outputs = self.execute(nodes["bitcoinData"])
        assert outputs["value"] == BITCOIN_DEFAULTS["high"]
        assert outputs["history"] == []
        assert len(queued) == 1

    def test_weather_and_earthquake_defaults(self):
        nodes, _ = self.nodes()
        assert self.execute(nodes["weatherData"]) == WEATHER_DEFAULTS
        assert self.execute(nodes["earthquakeData"]) == EARTHQUAKE_DEFAULTS

    def test_bitcoin_selected_point(self):
        async def fetch(days):
            return {**BITCOIN_DEFAULTS, "high": 10, "low": 2, "history": [2, 10]}

        queued = []
        source = DataSource("Bitcoin", fetch, BITCOIN_DEFAULTS, spawn=queued.append)
        sources = DataSources(bitcoin=source, weather=source, earthquake=source)
        bitcoin = create_data_nodes(sources)[0]

        self.execute(bitcoin, dataPoint="low")
        for fetch_now in queued:
            fetch_now()
        outputs = self.execute(bitcoin, dataPoint="low")
        assert outputs["value"] == 2
        assert outputs["history"] == [2, 10]

    def test_history_output_is_a_number_array(self):
        nodes, _ = self.nodes()
        history = nodes["bitcoinData"].get_output("history")
        assert history.data_type.value == "numberArray"


@pytest.mark.parametrize("name", ["bitcoin", "weather", "earthquake"])
def test_sources_share_update_callback(name):
    def callback():
        return None

    sources = DataSources.create(on_update=callback)
    assert getattr(sources, name).on_update is callback

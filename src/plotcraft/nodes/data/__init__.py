"""
Data Nodes package.

Live data sources (Bitcoin, weather, earthquakes) with background
fetching and a per-node cache.
"""

from plotcraft.nodes.data.data_nodes import (
    DataSources,
    create_data_nodes,
    register_data_nodes,
)
from plotcraft.nodes.data.source import (
    CACHE_TTL,
    DataSource,
)

__all__ = [
    "CACHE_TTL",
    "DataSource",
    "DataSources",
    "create_data_nodes",
    "register_data_nodes",
]

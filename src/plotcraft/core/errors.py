"""
Exceptions raised by PlotCraft.

Evaluation itself never raises: failing nodes degrade to empty output
and are logged. These exceptions cover file handling and external data.
"""


class PlotCraftError(Exception):
    """Base exception for PlotCraft errors."""
    pass


class WorkspaceError(PlotCraftError):
    """Workspace file missing, unreadable or in an unknown format."""
    pass


class DataFetchError(PlotCraftError):
    """An external data source could not be fetched or decoded."""
    pass

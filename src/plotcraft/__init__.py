"""
PlotCraft - Procedural node-graph line art for pen plotters.
"""

__version__ = "0.1.0"

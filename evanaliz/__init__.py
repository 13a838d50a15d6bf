"""EvAnaliz - real-estate listing investment analysis."""

__version__ = "0.1.0"

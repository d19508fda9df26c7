"""dayplanner - spreads task hours across days within daily capacity limits."""

__version__ = "0.1.0"
